"""
Realtime session: the single owner of the notification channel.
"""

from typing import Callable, Optional

from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.application.reconciliation import Reconciler
from crieur.domain.entities import Channel
from crieur.domain.entities.channel import StateListener
from crieur.domain.exceptions import ChannelClosedError
from crieur.domain.value_objects import ConnectionState, EventType
from crieur.infrastructure.auth import TokenGuard
from crieur.infrastructure.websocket import ConnectionManager


class RealtimeSession:
    """
    Opens, re-keys and closes the channel for one signed-in user.

    Without a credential the session stays offline: screens keep working
    from REST fetches and nothing is raised.

    Attributes:
        token_guard: Resolves the access token
        connection_manager: Owns the channel
        reconciler: Reacts to routed events
        reconnect_on_token_rotation: Reconnect when a refresh yields a
            different token
    """

    def __init__(
        self,
        token_guard: TokenGuard,
        connection_manager: ConnectionManager,
        reconciler: Reconciler,
        reconnect_on_token_rotation: bool = True,
        reporter: Optional[SystemReporter] = None,
    ):
        self.token_guard = token_guard
        self.connection_manager = connection_manager
        self.reconciler = reconciler
        self.reconnect_on_token_rotation = reconnect_on_token_rotation
        self.reporter = reporter

        self._attached_channel: Optional[Channel] = None

    @property
    def channel(self) -> Optional[Channel]:
        return self.connection_manager.channel

    @property
    def state(self) -> ConnectionState:
        return self.connection_manager.state

    @property
    def online(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    # ================================================================
    # LIFECYCLE
    # ================================================================

    async def start(self) -> Optional[Channel]:
        """
        Resolve a credential and open (or reuse) the channel.

        Returns:
            Channel, or None when no credential is available
        """
        token = await self.token_guard.resolve_valid_credential()
        if token is None:
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.SYSTEM.OFFLINE} No credential, live updates disabled",
                    context="RealtimeSession",
                )
            return None

        channel = await self.connection_manager.get_channel(token)
        self._attach(channel)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.SYSTEM.READY} Session started "
                f"(channel={channel.id}, state={channel.connection_state.value})",
                context="RealtimeSession",
            )
        return channel

    async def refresh_credential(self) -> Optional[str]:
        """
        Resolve the credential again and re-key the channel if it rotated.

        A refresh that clears the credentials ends the session.

        Returns:
            Current access token, or None
        """
        token = await self.token_guard.resolve_valid_credential()
        channel = self.channel

        if token is None:
            if channel is not None:
                if self.reporter:
                    self.reporter.warning(
                        f"{Emoji.AUTH.REVOKED} Credential lost, closing channel",
                        context="RealtimeSession",
                    )
                await self.stop()
            return None

        if channel is None:
            return token

        if token != channel.auth_token and self.reconnect_on_token_rotation:
            channel = await self.connection_manager.reauthenticate(token)
            if channel is not None:
                self._attach(channel)
        return token

    async def stop(self) -> None:
        """Close the channel and detach reconciliation (idempotent)."""
        self.reconciler.detach()
        self._attached_channel = None
        await self.connection_manager.close_channel()
        self.reconciler.query_cache.close()

        if self.reporter:
            self.reporter.info(
                f"{Emoji.SYSTEM.SHUTDOWN} Session stopped",
                context="RealtimeSession",
                verbose_level=2,
            )

    async def __aenter__(self) -> "RealtimeSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    # ================================================================
    # READ ACKNOWLEDGEMENTS
    # ================================================================

    async def mark_as_read(self, notification_id: str) -> bool:
        """
        Mark a notification read locally and tell the server.

        Returns:
            True if the acknowledgement was sent
        """
        self.reconciler.notification_store.mark_as_read(notification_id)
        return await self._emit(
            EventType.MARK_AS_READ.value, {"notificationId": str(notification_id)}
        )

    async def mark_all_as_read(self) -> bool:
        """Mark every notification read locally and tell the server."""
        self.reconciler.notification_store.mark_all_as_read()
        return await self._emit(EventType.MARK_ALL_AS_READ.value, None)

    async def _emit(self, event: str, data) -> bool:
        try:
            return await self.connection_manager.emit(event, data)
        except ChannelClosedError:
            if self.reporter:
                self.reporter.debug(
                    f"{Emoji.SYSTEM.OFFLINE} No channel, '{event}' kept local",
                    context="RealtimeSession",
                )
            return False

    # ================================================================
    # STATE LISTENERS
    # ================================================================

    def add_state_listener(self, listener: StateListener) -> Callable[[], None]:
        """
        Observe connection state of the current and future channels.

        Returns:
            Callable removing the listener
        """
        return self.connection_manager.add_state_listener(listener)

    def _attach(self, channel: Channel) -> None:
        if self._attached_channel is channel and self.reconciler.attached:
            return
        self._attached_channel = channel
        self.reconciler.attach(channel)
