"""
Connection manager owning the session's single notification channel.
"""

from typing import Any, Callable, List, Optional, Sequence

from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.application.routing import EventRouter
from crieur.domain.entities import Channel
from crieur.domain.entities.channel import StateListener
from crieur.domain.exceptions import (
    ChannelClosedError,
    ChannelConnectionError,
    CredentialMissingError,
    HandshakeRejectedError,
)
from crieur.domain.value_objects import ConnectionState, Event
from crieur.infrastructure.auth.token_decoder import TokenDecoder
from crieur.infrastructure.websocket.socketio_transport import SocketIOTransport
from crieur.infrastructure.websocket.transport import Transport

TransportFactory = Callable[..., Transport]

SERVER_DISCONNECT = "io server disconnect"


class ConnectionManager:
    """
    Manages the one live Channel of a session.

    get_channel() never opens a second transport while a channel is open,
    except when the credential belongs to another identity. Connection
    failures are recorded on the channel (FAILED + last_error) instead of
    being raised. A server-initiated disconnect is recorded as a rejected
    handshake. There is no automatic retry.
    """

    def __init__(
        self,
        endpoint_url: str,
        namespace: str = "/notifications",
        transports: Sequence[str] = ("websocket",),
        connect_timeout: float = 10.0,
        decoder: Optional[TokenDecoder] = None,
        transport_factory: Optional[TransportFactory] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        self.endpoint_url = endpoint_url.rstrip("/")
        self.namespace = namespace
        self.transports = list(transports)
        self.connect_timeout = connect_timeout
        self.decoder = decoder or TokenDecoder()
        self.transport_factory = transport_factory or self._default_transport
        self.reporter = reporter

        self.channel: Optional[Channel] = None
        self.transport: Optional[Transport] = None
        self.connections_opened = 0
        self._state_listeners: List[StateListener] = []

        if self.reporter:
            self.reporter.info(
                f"ConnectionManager initialized (url={self.endpoint_url}{namespace}, "
                f"transports={self.transports})",
                context="ConnectionManager",
                verbose_level=2,
            )

    def _default_transport(self, **kwargs) -> Transport:
        return SocketIOTransport(reporter=self.reporter, **kwargs)

    @property
    def state(self) -> ConnectionState:
        """Connection state of the current channel (DISCONNECTED if none)."""
        if self.channel is None:
            return ConnectionState.DISCONNECTED
        return self.channel.connection_state

    # ================================================================
    # CHANNEL LIFECYCLE
    # ================================================================

    async def get_channel(self, credential: str) -> Channel:
        """
        Return the session channel, opening it on first use.

        Args:
            credential: Access token for the handshake

        Returns:
            The open Channel (possibly FAILED; see channel.last_error)

        Raises:
            CredentialMissingError: If credential is empty
        """
        if not credential:
            raise CredentialMissingError("Cannot open a channel without a credential")

        channel = self.channel
        if channel is not None:
            identity = self.decoder.get_identity(credential)
            if identity and channel.identity and identity != channel.identity:
                if self.reporter:
                    self.reporter.info(
                        f"{Emoji.AUTH.TOKEN} Identity changed "
                        f"({channel.identity} -> {identity}), replacing channel",
                        context="ConnectionManager",
                    )
                await self.close_channel()
            elif channel.connection_state in (
                ConnectionState.FAILED,
                ConnectionState.DISCONNECTED,
            ):
                # Explicit reconnection of a dropped channel, subscriptions kept
                channel.auth_token = credential
                previous, self.transport = self.transport, None
                if previous is not None:
                    await self._disconnect_transport(previous)
                await self._open_transport(channel)
                return channel
            else:
                return channel

        channel = Channel(
            endpoint_url=self.endpoint_url,
            namespace=self.namespace,
            auth_token=credential,
            identity=self.decoder.get_identity(credential),
            router=EventRouter(reporter=self.reporter),
        )
        for listener in self._state_listeners:
            channel.add_state_listener(listener)
        self.channel = channel
        await self._open_transport(channel)
        return channel

    async def reauthenticate(self, credential: str) -> Optional[Channel]:
        """
        Reconnect the open channel with a new token.

        The Channel instance and its subscriptions are kept. A credential
        for another identity replaces the channel instead.

        Returns:
            The channel, or None when no channel is open
        """
        if not credential:
            raise CredentialMissingError("Cannot reauthenticate without a credential")

        channel = self.channel
        if channel is None:
            return None

        identity = self.decoder.get_identity(credential)
        if identity and channel.identity and identity != channel.identity:
            return await self.get_channel(credential)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.RECONNECTING} Reconnecting with rotated token",
                context="ConnectionManager",
            )

        old_transport = self.transport
        self.transport = None
        channel.auth_token = credential
        if old_transport is not None:
            await self._disconnect_transport(old_transport)
        if channel.closed or self.channel is not channel:
            return None

        channel.transition(ConnectionState.DISCONNECTED)
        await self._open_transport(channel)
        return channel

    async def close_channel(self) -> None:
        """
        Tear the channel down (idempotent).

        Dispatch stops before the first suspension point, so no event
        reaches a handler of the closed channel once this returns.
        """
        channel, transport = self.channel, self.transport
        self.channel = None
        self.transport = None
        if channel is None:
            return

        channel.mark_closed()
        cancelled = channel.router.close() if channel.router else 0

        if transport is not None:
            await self._disconnect_transport(transport)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.DISCONNECT} Channel closed "
                f"(id={channel.id}, cancelled_tasks={cancelled})",
                context="ConnectionManager",
            )

    def add_state_listener(self, listener: StateListener) -> Callable[[], None]:
        """
        Observe state transitions of the current and every later channel.

        Returns:
            Callable removing the listener
        """
        self._state_listeners.append(listener)
        if self.channel is not None:
            self.channel.add_state_listener(listener)

        def remove() -> None:
            if listener in self._state_listeners:
                self._state_listeners.remove(listener)
            if self.channel is not None:
                self.channel.remove_state_listener(listener)

        return remove

    # ================================================================
    # OUTBOUND
    # ================================================================

    async def emit(self, event: str, data: Any = None) -> bool:
        """
        Send an event on the open channel.

        Returns:
            False if not connected

        Raises:
            ChannelClosedError: If no channel is open
        """
        if self.channel is None:
            raise ChannelClosedError("none")
        transport = self.transport
        if transport is None or not self.channel.is_connected():
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.SYSTEM.OFFLINE} "
                    f"Not connected, '{event}' not sent",
                    context="ConnectionManager",
                )
            return False
        await transport.emit(event, data)
        return True

    # ================================================================
    # TRANSPORT PLUMBING
    # ================================================================

    async def _open_transport(self, channel: Channel) -> None:
        transport = self.transport_factory(
            endpoint_url=self.endpoint_url,
            namespace=self.namespace,
            token=channel.auth_token,
            transports=self.transports,
            connect_timeout=self.connect_timeout,
        )
        self._bind(channel, transport)
        self.transport = transport
        self.connections_opened += 1

        channel.transition(ConnectionState.CONNECTING)
        try:
            await transport.connect()
        except ChannelConnectionError as e:
            if self.transport is transport:
                channel.transition(ConnectionState.FAILED, error=e)
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.NETWORK.FAILED} {e}",
                    context="ConnectionManager",
                )
            return

        if channel.closed or self.transport is not transport:
            # Closed or superseded while the handshake was in flight
            await self._disconnect_transport(transport)
            return

        if channel.connection_state == ConnectionState.CONNECTING:
            channel.transition(ConnectionState.CONNECTED)

    def _bind(self, channel: Channel, transport: Transport) -> None:
        def is_current() -> bool:
            return (
                self.channel is channel
                and self.transport is transport
                and not channel.closed
            )

        def on_event(event_type: str, payload: Any) -> None:
            if not is_current() or channel.router is None:
                return
            event = Event(
                type=event_type,
                payload=payload if isinstance(payload, dict) else {"value": payload},
                sequence=channel.next_sequence(),
            )
            channel.router.dispatch(event)

        def on_connect() -> None:
            if is_current():
                channel.transition(ConnectionState.CONNECTED)

        def on_disconnect(reason: Optional[str]) -> None:
            if not is_current():
                return
            if reason == SERVER_DISCONNECT:
                # The server drops sockets whose credential it refuses
                error = HandshakeRejectedError(channel.url, "Disconnected by server")
                channel.transition(ConnectionState.FAILED, error=error)
                if self.reporter:
                    self.reporter.warning(
                        f"{Emoji.NETWORK.FAILED} {error}",
                        context="ConnectionManager",
                    )
                return
            channel.transition(ConnectionState.DISCONNECTED)

        def on_connect_error(data: Any) -> None:
            if is_current():
                message = data.get("message") if isinstance(data, dict) else data
                if self.reporter:
                    self.reporter.debug(
                        f"connect_error: {message}",
                        context="ConnectionManager",
                    )

        transport.set_handlers(on_event, on_connect, on_disconnect, on_connect_error)

    async def _disconnect_transport(self, transport: Transport) -> None:
        try:
            await transport.disconnect()
        except Exception as e:
            # Teardown must always complete
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.ERROR.WARNING} Transport disconnect failed: {e}",
                    context="ConnectionManager",
                )


# Global connection manager singleton (lazy initialization)
_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """
    Get or initialize the process-wide ConnectionManager from settings.

    Returns:
        ConnectionManager instance
    """
    global _connection_manager
    if _connection_manager is None:
        from crieur.config.settings import get_settings

        settings = get_settings()
        _connection_manager = ConnectionManager(
            endpoint_url=settings.server_url,
            namespace=settings.namespace,
            transports=settings.transports,
            connect_timeout=settings.connect_timeout,
            decoder=TokenDecoder(settings.expiry_leeway_seconds),
        )
    return _connection_manager


def override_connection_manager(manager: ConnectionManager) -> None:
    """Override the global ConnectionManager (for testing)."""
    global _connection_manager
    _connection_manager = manager


def reset_connection_manager() -> None:
    """
    Drop the global ConnectionManager.

    Callers must close its channel first; this only forgets the instance.
    """
    global _connection_manager
    _connection_manager = None
