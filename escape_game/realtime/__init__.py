"""Realtime infrastructure (Socket.IO).

This package holds the Socket.IO server and the wire event catalog the game
clients speak. The session semantics live in :mod:`escape_game.session`.
"""
