"""
ConnectionState value object - lifecycle states of a Channel.
"""

from enum import Enum


class ConnectionState(Enum):
    """Observable connection state of a Channel."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"

    def is_live(self) -> bool:
        """Check if the channel is connecting or connected."""
        return self in (ConnectionState.CONNECTING, ConnectionState.CONNECTED)
