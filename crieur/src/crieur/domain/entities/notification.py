"""
Notification entity - one entry of the in-memory notification list.
"""

from typing import Any, Dict, Optional

from crieur.domain.events.notifications import NotificationPayload


class Notification:
    """
    Notification entity shown in the app's notification list.

    Attributes:
        id: Server notification id (dedupe key)
        type: Notification category (e.g. 'ORDER', 'info')
        message: Text displayed to the user
        created_at: ISO timestamp from the server
        data: Raw payload
        read: Read flag
    """

    def __init__(
        self,
        notification_id: str,
        type: str,
        message: str,
        created_at: str,
        data: Optional[Dict[str, Any]] = None,
        read: bool = False,
    ):
        self.id = notification_id
        self.type = type
        self.message = message
        self.created_at = created_at
        self.data = data or {}
        self.read = read

    @classmethod
    def from_payload(cls, payload: NotificationPayload) -> "Notification":
        """Build a Notification from a validated payload."""
        return cls(
            notification_id=payload.id,
            type=payload.type,
            message=payload.message,
            created_at=payload.created_at,
            data=payload.model_dump(by_alias=True),
            read=payload.read,
        )

    def mark_read(self) -> bool:
        """
        Mark as read.

        Returns:
            True if the flag changed
        """
        if self.read:
            return False
        self.read = True
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "createdAt": self.created_at,
            "data": self.data,
            "read": self.read,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Notification):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        state = "read" if self.read else "unread"
        return f"Notification(id={self.id}, type={self.type}, {state})"
