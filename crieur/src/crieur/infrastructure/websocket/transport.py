"""
Transport contract used by the ConnectionManager.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

EventCallback = Callable[[str, Any], None]
ConnectCallback = Callable[[], None]
DisconnectCallback = Callable[[Optional[str]], None]
ConnectErrorCallback = Callable[[Any], None]


class Transport(ABC):
    """
    One socket connection to a namespace.

    Callbacks are bound by the ConnectionManager through set_handlers()
    before connect() is awaited.
    """

    def __init__(
        self,
        endpoint_url: str,
        namespace: str,
        token: str,
        transports: Sequence[str] = ("websocket",),
        connect_timeout: float = 10.0,
    ):
        self.endpoint_url = endpoint_url
        self.namespace = namespace
        self.token = token
        self.transports = list(transports)
        self.connect_timeout = connect_timeout

        self.on_event: Optional[EventCallback] = None
        self.on_connect: Optional[ConnectCallback] = None
        self.on_disconnect: Optional[DisconnectCallback] = None
        self.on_connect_error: Optional[ConnectErrorCallback] = None

    def set_handlers(
        self,
        on_event: EventCallback,
        on_connect: Optional[ConnectCallback] = None,
        on_disconnect: Optional[DisconnectCallback] = None,
        on_connect_error: Optional[ConnectErrorCallback] = None,
    ) -> None:
        self.on_event = on_event
        self.on_connect = on_connect
        self.on_disconnect = on_disconnect
        self.on_connect_error = on_connect_error

    @property
    @abstractmethod
    def connected(self) -> bool:
        """True while the namespace is connected."""

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the connection and complete the handshake.

        Raises:
            ChannelConnectionError: Network failure
            HandshakeRejectedError: Server refused the credential
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection (idempotent)."""

    @abstractmethod
    async def emit(self, event: str, data: Any = None) -> None:
        """Send an event to the server."""
