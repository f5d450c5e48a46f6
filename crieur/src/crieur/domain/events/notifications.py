"""
Notification event schemas.
"""

import hashlib
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import Field, model_validator

from crieur.domain.events.base import BasePayload


def derive_notification_id(type_: str, message: str, created_at: str) -> str:
    """
    Stable id for notifications pushed without one.

    Identical redeliveries hash to the same id, so deduplication still holds.
    """
    digest = hashlib.sha1(
        f"{type_}|{message}|{created_at}".encode("utf-8")
    ).hexdigest()
    return f"local-{digest[:16]}"


class NotificationPayload(BasePayload):
    """
    notification payload.

    Attributes:
        id: Server notification id (derived when missing)
        type: Category (default 'info')
        message: Text (falls back to 'body', then 'title')
        created_at: ISO timestamp (wire: createdAt)
        data: Optional nested data
        read: Read flag
    """

    id: str = Field(default="")
    type: str = Field(default="info")
    message: str = Field(default="")
    created_at: str = Field(default="", alias="createdAt")
    data: Optional[Dict[str, Any]] = Field(default=None)
    read: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def fill_defaults(cls, values: Any) -> Any:
        """Resolve the message fallback, the id and the timestamp."""
        if not isinstance(values, dict):
            return values
        values = dict(values)

        if not values.get("message"):
            values["message"] = values.get("body") or values.get("title") or ""
        if values.get("type") is None:
            values["type"] = "info"

        created_at = values.pop("created_at", None) or values.get("createdAt")
        if values.get("id") is not None and str(values["id"]):
            values["id"] = str(values["id"])
        else:
            # Derived before defaulting the timestamp so redeliveries match
            values["id"] = derive_notification_id(
                str(values["type"]), values["message"], str(created_at or "")
            )
        values["createdAt"] = str(
            created_at or datetime.now(timezone.utc).isoformat()
        )
        return values


class NotificationReadPayload(BasePayload):
    """notificationRead acknowledgement."""

    notification_id: Optional[str] = Field(default=None, alias="notificationId")

    @model_validator(mode="before")
    @classmethod
    def accept_id_alias(cls, values: Any) -> Any:
        """Accept both 'notificationId' and 'id'."""
        if isinstance(values, dict) and "notificationId" not in values:
            if values.get("id") is not None:
                values = dict(values)
                values["notificationId"] = values["id"]
        if isinstance(values, dict) and values.get("notificationId") is not None:
            values = dict(values)
            values["notificationId"] = str(values["notificationId"])
        return values


class AllNotificationsReadPayload(BasePayload):
    """allNotificationsRead acknowledgement (no fields)."""
