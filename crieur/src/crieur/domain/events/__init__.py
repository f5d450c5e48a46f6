"""
Inbound event payload schemas.

Usage:
    >>> from crieur.domain.events import parse_payload
    >>> payload = parse_payload("orderStatusChanged", {"orderId": 42})
    >>> payload.order_id
    '42'
"""

from typing import Any, Dict, Type

from crieur.domain.events.base import BasePayload
from crieur.domain.events.notifications import (
    AllNotificationsReadPayload,
    NotificationPayload,
    NotificationReadPayload,
    derive_notification_id,
)
from crieur.domain.events.orders import (
    DeliveryAssignedPayload,
    NewOrderPayload,
    OrderCancelledPayload,
    OrderEventPayload,
    OrderReadyForPickupPayload,
    OrderStatusChangedPayload,
    PickingPayload,
)
from crieur.domain.value_objects.event_type import EventType

PAYLOAD_MODELS: Dict[str, Type[BasePayload]] = {
    EventType.ORDER_STATUS_CHANGED.value: OrderStatusChangedPayload,
    EventType.NEW_ORDER.value: NewOrderPayload,
    EventType.DELIVERY_ASSIGNED.value: DeliveryAssignedPayload,
    EventType.ORDER_CANCELLED.value: OrderCancelledPayload,
    EventType.ORDER_READY_FOR_PICKUP.value: OrderReadyForPickupPayload,
    EventType.ORDER_ITEM_PICKED.value: PickingPayload,
    EventType.ORDER_PICKING_COMPLETED.value: PickingPayload,
    EventType.NOTIFICATION.value: NotificationPayload,
    EventType.NOTIFICATION_READ.value: NotificationReadPayload,
    EventType.ALL_NOTIFICATIONS_READ.value: AllNotificationsReadPayload,
}


def parse_payload(event_type: str, payload: Any) -> BasePayload:
    """
    Validate a raw payload against its event schema.

    Unknown event types fall back to BasePayload. Non-dict payloads are
    wrapped as {"value": payload}.

    Raises:
        pydantic.ValidationError: If a known field has an invalid type
    """
    if not isinstance(payload, dict):
        payload = {} if payload is None else {"value": payload}
    model = PAYLOAD_MODELS.get(str(event_type), BasePayload)
    return model.model_validate(payload)


__all__ = [
    "AllNotificationsReadPayload",
    "BasePayload",
    "DeliveryAssignedPayload",
    "NewOrderPayload",
    "NotificationPayload",
    "NotificationReadPayload",
    "OrderCancelledPayload",
    "OrderEventPayload",
    "OrderReadyForPickupPayload",
    "OrderStatusChangedPayload",
    "PAYLOAD_MODELS",
    "PickingPayload",
    "derive_notification_id",
    "parse_payload",
]
