"""
In-memory socket transport.
"""

import asyncio
from typing import Any, List, Optional, Tuple

from crieur.domain.exceptions import ChannelConnectionError, HandshakeRejectedError
from crieur.infrastructure.websocket.transport import Transport


class FakeTransport(Transport):
    """
    Transport double driven by the test.

    push() simulates a server event; emitted records outbound events.
    """

    def __init__(
        self,
        endpoint_url: str,
        namespace: str,
        token: str,
        transports=("websocket",),
        connect_timeout: float = 10.0,
        fail_with: Optional[Exception] = None,
        connect_delay: float = 0.0,
        drop_on_connect: Optional[str] = None,
    ):
        super().__init__(endpoint_url, namespace, token, transports, connect_timeout)
        self.fail_with = fail_with
        self.connect_delay = connect_delay
        self.drop_on_connect = drop_on_connect
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.emitted: List[Tuple[str, Any]] = []
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self.connect_calls += 1
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.fail_with is not None:
            if isinstance(self.fail_with, HandshakeRejectedError) and self.on_connect_error:
                self.on_connect_error({"message": self.fail_with.reason})
            raise self.fail_with
        self._connected = True
        if self.on_connect:
            self.on_connect()
        if self.drop_on_connect:
            self.drop(self.drop_on_connect)

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        if self._connected:
            self._connected = False
            if self.on_disconnect:
                self.on_disconnect("io client disconnect")

    async def emit(self, event: str, data: Any = None) -> None:
        self.emitted.append((event, data))

    def push(self, event: str, payload: Any = None) -> None:
        """Deliver a server event."""
        if self.on_event:
            self.on_event(event, payload)

    def drop(self, reason: str = "transport close") -> None:
        """Simulate a server-side disconnect."""
        self._connected = False
        if self.on_disconnect:
            self.on_disconnect(reason)


class FakeTransportFactory:
    """
    transport_factory for ConnectionManager recording every transport.

    Set fail_with to make the next transports fail to connect, or
    drop_on_connect to have the server drop them right after the
    namespace connect.
    """

    def __init__(
        self,
        fail_with: Optional[Exception] = None,
        connect_delay: float = 0.0,
        drop_on_connect: Optional[str] = None,
    ):
        self.fail_with = fail_with
        self.connect_delay = connect_delay
        self.drop_on_connect = drop_on_connect
        self.transports: List[FakeTransport] = []

    def __call__(self, **kwargs) -> FakeTransport:
        transport = FakeTransport(
            fail_with=self.fail_with,
            connect_delay=self.connect_delay,
            drop_on_connect=self.drop_on_connect,
            **kwargs,
        )
        self.transports.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.transports[-1]

    @property
    def count(self) -> int:
        return len(self.transports)

    @staticmethod
    def network_error(url: str = "http://crieur-test.local/notifications"):
        return ChannelConnectionError(url, "network unreachable")

    @staticmethod
    def rejected(url: str = "http://crieur-test.local/notifications"):
        return HandshakeRejectedError(url, "Unauthorized")
