"""Shared game session: state store, typed mutations and the session hub.

The hub is imported from :mod:`escape_game.session.hub` directly; this
package stays import-light so the realtime event modules can depend on the
mutation types.
"""
