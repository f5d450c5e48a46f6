"""
Socket.IO transport built on python-socketio's AsyncClient.
"""

import asyncio
from typing import Any, Callable, Optional, Sequence

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError
from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.domain.exceptions import (
    ChannelConnectionError,
    HandshakeRejectedError,
)
from crieur.infrastructure.websocket.transport import Transport


def _error_message(data: Any) -> str:
    if isinstance(data, dict):
        return str(data.get("message") or data)
    return str(data) if data is not None else "connection refused"


class SocketIOTransport(Transport):
    """
    Transport connecting to '<endpoint_url><namespace>'.

    Automatic reconnection is disabled: reconnecting is the caller's
    decision. The handshake sends auth={"token": <token>}.
    """

    def __init__(
        self,
        endpoint_url: str,
        namespace: str,
        token: str,
        transports: Sequence[str] = ("websocket",),
        connect_timeout: float = 10.0,
        reporter: Optional[SystemReporter] = None,
        client_factory: Optional[Callable[..., Any]] = None,
    ):
        """
        Initialize Socket.IO transport.

        Args:
            endpoint_url: Backend base URL
            namespace: Namespace path (e.g. '/notifications')
            token: Access token presented at handshake
            transports: Engine.IO transports (websocket only)
            connect_timeout: Seconds to wait for the namespace handshake
            reporter: Optional SystemReporter
            client_factory: AsyncClient factory (tests inject a mock)
        """
        super().__init__(endpoint_url, namespace, token, transports, connect_timeout)
        self.reporter = reporter

        factory = client_factory or socketio.AsyncClient
        self.client = factory(reconnection=False, logger=False, engineio_logger=False)
        self._rejection: Optional[Any] = None

        self.client.on("connect", self._handle_connect, namespace=namespace)
        self.client.on("disconnect", self._handle_disconnect, namespace=namespace)
        self.client.on("connect_error", self._handle_connect_error, namespace=namespace)
        self.client.on("*", self._handle_any, namespace=namespace)

    @property
    def connected(self) -> bool:
        return bool(self.client.connected)

    @property
    def url(self) -> str:
        return f"{self.endpoint_url}{self.namespace}"

    async def _handle_connect(self) -> None:
        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.CONNECTED} Connected to {self.url}",
                context="SocketIOTransport",
                verbose_level=2,
            )
        if self.on_connect:
            self.on_connect()

    async def _handle_disconnect(self, *args) -> None:
        reason = str(args[0]) if args else None
        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.DISCONNECTED} Disconnected from {self.url}"
                + (f" ({reason})" if reason else ""),
                context="SocketIOTransport",
                verbose_level=2,
            )
        if self.on_disconnect:
            self.on_disconnect(reason)

    async def _handle_connect_error(self, data: Any = None) -> None:
        self._rejection = data if data is not None else {}
        if self.reporter:
            self.reporter.warning(
                f"{Emoji.NETWORK.FAILED} Handshake rejected: {_error_message(data)}",
                context="SocketIOTransport",
            )
        if self.on_connect_error:
            self.on_connect_error(data)

    async def _handle_any(self, event: str, *args) -> None:
        payload = args[0] if len(args) == 1 else (list(args) if args else None)
        if self.reporter:
            self.reporter.debug(
                f"{Emoji.NETWORK.RECEIVE} {event}",
                context="SocketIOTransport",
            )
        if self.on_event:
            self.on_event(event, payload)

    async def connect(self) -> None:
        self._rejection = None
        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.CONNECTING} Connecting to {self.url}",
                context="SocketIOTransport",
                verbose_level=2,
            )
        try:
            await self.client.connect(
                self.endpoint_url,
                auth={"token": self.token},
                transports=self.transports,
                namespaces=[self.namespace],
                wait_timeout=self.connect_timeout,
            )
        except (SocketIOConnectionError, OSError, asyncio.TimeoutError) as e:
            if self._rejection is not None:
                raise HandshakeRejectedError(self.url, _error_message(self._rejection))
            raise ChannelConnectionError(self.url, str(e) or type(e).__name__)

    async def disconnect(self) -> None:
        if self.reporter:
            self.reporter.debug(
                f"{Emoji.NETWORK.DISCONNECT} Closing {self.url}",
                context="SocketIOTransport",
            )
        await self.client.disconnect()

    async def emit(self, event: str, data: Any = None) -> None:
        if self.reporter:
            self.reporter.debug(
                f"{Emoji.NETWORK.SEND} {event}",
                context="SocketIOTransport",
            )
        await self.client.emit(event, data, namespace=self.namespace)
