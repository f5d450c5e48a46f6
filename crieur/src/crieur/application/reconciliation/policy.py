"""
Reconciliation policy: one table mapping (profile, event type) to the
reaction each client app applies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from crieur.domain.value_objects import EventType

QueryKey = Tuple[Any, ...]


class Profile(str, Enum):
    """Client application profile."""

    ADMIN = "admin"
    SELLER = "seller"
    CUSTOMER = "customer"

    def __str__(self) -> str:
        return self.value


class NoticeKind(str, Enum):
    """Which transient message an event produces."""

    NONE = "none"
    STATUS = "status"
    NEW_ORDER = "new_order"
    CANCELLED = "cancelled"
    PICKING_COMPLETED = "picking_completed"
    NOTIFICATION = "notification"


class StoreAction(str, Enum):
    """Local merge into the notification store."""

    NONE = "none"
    ADD = "add"
    MARK_READ = "mark_read"
    MARK_ALL_READ = "mark_all_read"


@dataclass(frozen=True)
class Reaction:
    """
    Reaction to one event type.

    Attributes:
        invalidate: Query key prefixes to invalidate (refetch)
        order_detail: Also invalidate ("order", <orderId>)
        notice: Transient message to show
        store: Notification store merge
    """

    invalidate: Tuple[QueryKey, ...] = field(default_factory=tuple)
    order_detail: bool = False
    notice: NoticeKind = NoticeKind.NONE
    store: StoreAction = StoreAction.NONE


_NOTIFICATION_REACTIONS = {
    EventType.NOTIFICATION.value: Reaction(
        notice=NoticeKind.NOTIFICATION, store=StoreAction.ADD
    ),
    EventType.NOTIFICATION_READ.value: Reaction(store=StoreAction.MARK_READ),
    EventType.ALL_NOTIFICATIONS_READ.value: Reaction(
        store=StoreAction.MARK_ALL_READ
    ),
}

_ADMIN_QUEUES: Tuple[QueryKey, ...] = (
    ("orders",),
    ("admin-dashboard",),
    ("recent-orders",),
)

_SELLER_QUEUES: Tuple[QueryKey, ...] = (
    ("seller-stats",),
    ("seller-orders",),
    ("pending-orders-preview",),
    ("picking-orders",),
)

_CUSTOMER_QUEUES: Tuple[QueryKey, ...] = (("my-orders",),)


DEFAULT_TABLE: Dict[Profile, Dict[str, Reaction]] = {
    Profile.ADMIN: {
        EventType.ORDER_STATUS_CHANGED.value: Reaction(
            _ADMIN_QUEUES, order_detail=True, notice=NoticeKind.STATUS
        ),
        EventType.NEW_ORDER.value: Reaction(_ADMIN_QUEUES),
        EventType.DELIVERY_ASSIGNED.value: Reaction(_ADMIN_QUEUES, order_detail=True),
        EventType.ORDER_CANCELLED.value: Reaction(_ADMIN_QUEUES, order_detail=True),
        EventType.ORDER_READY_FOR_PICKUP.value: Reaction(
            _ADMIN_QUEUES, order_detail=True
        ),
        **_NOTIFICATION_REACTIONS,
    },
    Profile.SELLER: {
        EventType.ORDER_STATUS_CHANGED.value: Reaction(
            _SELLER_QUEUES, order_detail=True, notice=NoticeKind.STATUS
        ),
        EventType.NEW_ORDER.value: Reaction(
            _SELLER_QUEUES, notice=NoticeKind.NEW_ORDER
        ),
        EventType.DELIVERY_ASSIGNED.value: Reaction(
            _SELLER_QUEUES, order_detail=True
        ),
        EventType.ORDER_CANCELLED.value: Reaction(
            _SELLER_QUEUES, order_detail=True, notice=NoticeKind.CANCELLED
        ),
        EventType.ORDER_ITEM_PICKED.value: Reaction(order_detail=True),
        EventType.ORDER_PICKING_COMPLETED.value: Reaction(
            _SELLER_QUEUES, order_detail=True, notice=NoticeKind.PICKING_COMPLETED
        ),
        **_NOTIFICATION_REACTIONS,
    },
    Profile.CUSTOMER: {
        EventType.ORDER_STATUS_CHANGED.value: Reaction(
            _CUSTOMER_QUEUES, order_detail=True, notice=NoticeKind.STATUS
        ),
        EventType.DELIVERY_ASSIGNED.value: Reaction(
            _CUSTOMER_QUEUES, order_detail=True
        ),
        EventType.ORDER_CANCELLED.value: Reaction(
            _CUSTOMER_QUEUES, order_detail=True, notice=NoticeKind.CANCELLED
        ),
        **_NOTIFICATION_REACTIONS,
    },
}


class ReconciliationPolicy:
    """
    Per-profile lookup over the reaction table.

    Event types absent from a profile's table are ignored by that profile
    (e.g. customers ignore newOrder).
    """

    def __init__(
        self,
        profile: Union[Profile, str],
        table: Optional[Dict[Profile, Dict[str, Reaction]]] = None,
    ):
        self.profile = Profile(profile)
        self._reactions = dict((table or DEFAULT_TABLE)[self.profile])

    def event_types(self) -> List[str]:
        """Event types this profile reacts to."""
        return list(self._reactions)

    def reaction_for(self, event_type: str) -> Optional[Reaction]:
        return self._reactions.get(str(event_type))

    def query_keys(
        self, event_type: str, order_id: Optional[str] = None
    ) -> List[QueryKey]:
        """
        Query key prefixes to invalidate for an event.

        Args:
            event_type: Wire event name
            order_id: Affected order, if the payload carries one

        Returns:
            Key prefixes, queues first then the order detail
        """
        reaction = self.reaction_for(event_type)
        if reaction is None:
            return []
        keys = list(reaction.invalidate)
        if reaction.order_detail and order_id:
            keys.append(("order", order_id))
        return keys

    def __repr__(self) -> str:
        return f"ReconciliationPolicy(profile={self.profile.value})"
