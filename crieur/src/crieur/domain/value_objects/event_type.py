"""
EventType value object - catalog of inbound and outbound event names.
"""

from enum import Enum
from typing import Union

from crieur.domain.exceptions import InvalidEventTypeError

WILDCARD = "*"


class EventType(str, Enum):
    """
    Event names pushed on the notifications namespace.

    Members compare equal to their wire names, so plain strings can be
    used anywhere an EventType is accepted.
    """

    ORDER_STATUS_CHANGED = "orderStatusChanged"
    NEW_ORDER = "newOrder"
    DELIVERY_ASSIGNED = "deliveryAssigned"
    ORDER_CANCELLED = "orderCancelled"
    ORDER_READY_FOR_PICKUP = "orderReadyForPickup"
    ORDER_ITEM_PICKED = "order:item-picked"
    ORDER_PICKING_COMPLETED = "order:picking-completed"
    NOTIFICATION = "notification"
    NOTIFICATION_READ = "notificationRead"
    ALL_NOTIFICATIONS_READ = "allNotificationsRead"

    # Outbound (client -> server)
    MARK_AS_READ = "markAsRead"
    MARK_ALL_AS_READ = "markAllAsRead"

    def __str__(self) -> str:
        return self.value


def normalize_event_type(event_type: Union[str, EventType]) -> str:
    """
    Convert an EventType or string into its wire name.

    Args:
        event_type: EventType member or raw event name

    Returns:
        Wire name of the event

    Raises:
        InvalidEventTypeError: If the value is empty or not a string
    """
    if isinstance(event_type, EventType):
        return event_type.value
    if not isinstance(event_type, str) or not event_type.strip():
        raise InvalidEventTypeError(event_type)
    return event_type
