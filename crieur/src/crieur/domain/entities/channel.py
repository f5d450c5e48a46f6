"""
Channel entity - one multiplexed connection to the notifications namespace.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, List, Optional
from uuid import UUID, uuid4

from crieur.domain.value_objects import ConnectionState

if TYPE_CHECKING:
    from crieur.application.routing.event_router import EventRouter

StateListener = Callable[[ConnectionState, ConnectionState], None]


class Channel:
    """
    Channel entity representing the session's notification connection.

    A channel belongs to one authenticated identity and owns the router
    that fans its events out to subscriptions. The transport itself is
    held by the ConnectionManager.

    Attributes:
        id: Unique channel identifier
        endpoint_url: Backend base URL
        namespace: Logical sub-channel (e.g. '/notifications')
        auth_token: Credential presented at handshake
        identity: User identity decoded from the token, if decodable
        connection_state: Current ConnectionState
        last_error: Last connection error recorded, if any
        listener_failures: Number of state listener calls that raised
        router: EventRouter dispatching this channel's events
        created_at: Channel creation timestamp
    """

    def __init__(
        self,
        endpoint_url: str,
        namespace: str,
        auth_token: str,
        identity: Optional[str] = None,
        router: Optional["EventRouter"] = None,
        channel_id: UUID = None,
        created_at: datetime = None,
    ):
        """
        Initialize Channel entity.

        Args:
            endpoint_url: Backend base URL
            namespace: Namespace path, starting with '/'
            auth_token: Handshake credential
            identity: Optional identity claim of the credential
            router: Optional EventRouter bound to this channel
            channel_id: Optional channel ID (generated if not provided)
            created_at: Optional creation timestamp
        """
        self.id: UUID = channel_id or uuid4()
        self.endpoint_url: str = endpoint_url.rstrip("/")
        self.namespace: str = namespace
        self.auth_token: str = auth_token
        self.identity: Optional[str] = identity
        self.router = router
        self.created_at: datetime = created_at or datetime.now(timezone.utc)

        self.connection_state: ConnectionState = ConnectionState.DISCONNECTED
        self.last_error: Optional[Exception] = None
        self.closed: bool = False
        self.events_received: int = 0
        self.listener_failures: int = 0
        self.last_listener_error: Optional[Exception] = None
        self._state_listeners: List[StateListener] = []

    @property
    def url(self) -> str:
        """Full namespace URL (endpoint + namespace)."""
        return f"{self.endpoint_url}{self.namespace}"

    def next_sequence(self) -> int:
        """Arrival counter for the next inbound event (starts at 1)."""
        self.events_received += 1
        return self.events_received

    def is_open(self) -> bool:
        """Check if the channel has not been torn down."""
        return not self.closed

    def is_connected(self) -> bool:
        """Check if the transport is currently connected."""
        return self.connection_state == ConnectionState.CONNECTED

    def add_state_listener(self, listener: StateListener) -> Callable[[], None]:
        """
        Observe connection state transitions.

        Args:
            listener: Called with (old_state, new_state)

        Returns:
            Callable removing the listener (safe to call twice)
        """
        self._state_listeners.append(listener)
        return lambda: self.remove_state_listener(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        """Stop observing (no-op if not registered)."""
        if listener in self._state_listeners:
            self._state_listeners.remove(listener)

    def transition(
        self, new_state: ConnectionState, error: Optional[Exception] = None
    ) -> bool:
        """
        Move to a new connection state and notify listeners.

        A closed channel only accepts DISCONNECTED.

        Args:
            new_state: Target state
            error: Error that caused a FAILED transition

        Returns:
            True if the state changed
        """
        if self.closed and new_state != ConnectionState.DISCONNECTED:
            return False

        if error is not None:
            self.last_error = error
        elif new_state == ConnectionState.CONNECTED:
            self.last_error = None

        old_state = self.connection_state
        if old_state == new_state:
            return False

        self.connection_state = new_state
        for listener in list(self._state_listeners):
            try:
                listener(old_state, new_state)
            except Exception as e:
                # Observers never break the connection lifecycle
                self.listener_failures += 1
                self.last_listener_error = e
        return True

    def mark_closed(self) -> None:
        """Tear the channel down; no further state changes besides DISCONNECTED."""
        self.closed = True
        self.transition(ConnectionState.DISCONNECTED)
        self._state_listeners.clear()

    def __eq__(self, other) -> bool:
        """Check equality based on channel ID."""
        if not isinstance(other, Channel):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on channel ID."""
        return hash(self.id)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"Channel(id={self.id}, url={self.url}, "
            f"state={self.connection_state.value}, identity={self.identity})"
        )
