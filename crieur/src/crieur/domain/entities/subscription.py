"""
Subscription entity - interest of one handler in one event type.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Union
from uuid import UUID, uuid4

Handler = Callable[[Any], Union[None, Awaitable[None]]]


class Subscription:
    """
    Subscription entity registered against a channel's router.

    Attributes:
        id: Unique subscription identifier
        event_type: Wire name of the event type
        handler: Callback invoked with the event payload (sync or async)
        created_at: Registration timestamp
        active: False once unsubscribed
    """

    def __init__(
        self,
        event_type: str,
        handler: Handler,
        subscription_id: UUID = None,
        created_at: datetime = None,
    ):
        self.id: UUID = subscription_id or uuid4()
        self.event_type: str = event_type
        self.handler: Handler = handler
        self.created_at: datetime = created_at or datetime.now(timezone.utc)
        self.active: bool = True

    @property
    def handler_name(self) -> str:
        """Readable handler name for logs."""
        return getattr(self.handler, "__qualname__", None) or repr(self.handler)

    def deactivate(self) -> bool:
        """
        Mark the subscription inactive.

        Returns:
            True if it was active before the call
        """
        was_active = self.active
        self.active = False
        return was_active

    def __eq__(self, other) -> bool:
        if not isinstance(other, Subscription):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        state = "active" if self.active else "inactive"
        return (
            f"Subscription(id={self.id}, event_type={self.event_type}, "
            f"handler={self.handler_name}, {state})"
        )
