"""
Application layer.

Routing, reconciliation and the realtime session that ties them to the
connection manager.
"""
