"""Wire-level event catalog and publishers.

These modules should contain event names and *publish* helpers only (build
payload + emit). They must not define Socket.IO server instances or
connection handlers.
"""
