"""
Order event schemas.

Events pushed by the backend when an order is created, changes status,
gets a driver or is cancelled, plus the seller picking flow.
"""

from typing import Optional

from pydantic import Field, field_validator

from crieur.domain.events.base import BasePayload


class OrderEventPayload(BasePayload):
    """
    Common order event payload.

    Attributes:
        order_id: Affected order (wire: orderId)
        order_number: Human readable order number (wire: orderNumber)
        status: New order status, upper-cased (e.g. 'OUT_FOR_DELIVERY')
        title: Optional display title
        body: Optional display body
        driver_name: Assigned driver (wire: driverName)
    """

    order_id: Optional[str] = Field(default=None, alias="orderId")
    order_number: Optional[str] = Field(default=None, alias="orderNumber")
    status: Optional[str] = Field(default=None)
    title: Optional[str] = Field(default=None)
    body: Optional[str] = Field(default=None)
    driver_name: Optional[str] = Field(default=None, alias="driverName")

    @field_validator("order_id", "order_number", mode="before")
    @classmethod
    def coerce_identifier(cls, v):
        """Accept numeric identifiers."""
        if v is None:
            return None
        return str(v)

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v: Optional[str]) -> Optional[str]:
        """Upper-case the status."""
        return v.upper() if v else v

    @property
    def display_number(self) -> Optional[str]:
        """Order number if present, else the id."""
        return self.order_number or self.order_id


class OrderStatusChangedPayload(OrderEventPayload):
    """orderStatusChanged payload."""


class NewOrderPayload(OrderEventPayload):
    """newOrder payload."""

    customer_name: Optional[str] = Field(default=None, alias="customerName")


class DeliveryAssignedPayload(OrderEventPayload):
    """deliveryAssigned payload."""


class OrderCancelledPayload(OrderEventPayload):
    """orderCancelled payload."""

    reason: Optional[str] = Field(default=None)


class OrderReadyForPickupPayload(OrderEventPayload):
    """orderReadyForPickup payload."""


class PickingPayload(OrderEventPayload):
    """order:item-picked and order:picking-completed payload."""

    item_id: Optional[str] = Field(default=None, alias="itemId")

    @field_validator("item_id", mode="before")
    @classmethod
    def coerce_item_id(cls, v):
        if v is None:
            return None
        return str(v)
