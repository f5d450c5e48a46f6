"""
Channel-related exceptions.
"""


class ChannelError(Exception):
    """Base exception for channel errors."""

    pass


class ChannelConnectionError(ChannelError):
    """Raised when the transport connection cannot be established."""

    def __init__(self, url: str, reason: str):
        """
        Initialize ChannelConnectionError.

        Args:
            url: Endpoint the channel tried to reach
            reason: Transport error description
        """
        super().__init__(f"Connection to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class HandshakeRejectedError(ChannelConnectionError):
    """Raised when the server rejects the handshake credential."""

    pass


class ChannelClosedError(ChannelError):
    """Raised when subscribing to or emitting on a closed channel."""

    def __init__(self, channel_id: str):
        """
        Initialize ChannelClosedError.

        Args:
            channel_id: Identifier of the closed channel
        """
        super().__init__(f"Channel is closed: {channel_id}")
        self.channel_id = channel_id
