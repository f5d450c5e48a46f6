"""
Transient notices (toasts) produced by reconciliation.
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, List, Optional

from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.application.reconciliation.policy import NoticeKind
from crieur.domain.events import NotificationPayload, OrderEventPayload


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """
    A short user-facing message.

    Attributes:
        title: Headline
        body: Optional detail line
        level: Severity used for styling
        event_type: Event that produced it
        emoji: Optional leading symbol
    """

    title: str
    body: Optional[str] = None
    level: NoticeLevel = NoticeLevel.INFO
    event_type: Optional[str] = None
    emoji: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def render(self) -> str:
        head = f"{self.emoji} {self.title}" if self.emoji else self.title
        return f"{head}: {self.body}" if self.body else head


STATUS_MESSAGES = {
    "ASSIGNED": (Emoji.ORDER.ASSIGNED, "Driver assigned", "{driver} accepted order #{number}"),
    "OUT_FOR_DELIVERY": (
        Emoji.ORDER.OUT_FOR_DELIVERY,
        "Order out for delivery",
        "Order #{number} is on its way to the customer",
    ),
    "DELIVERED": (
        Emoji.ORDER.DELIVERED,
        "Order delivered",
        "Order #{number} was delivered successfully",
    ),
    "READY_FOR_PICKUP": (
        Emoji.ORDER.READY_FOR_PICKUP,
        "Ready for pickup",
        "Order #{number} is waiting for pickup",
    ),
}

DEFAULT_STATUS_TITLE = "Order updated"
DEFAULT_STATUS_BODY = "Your order status changed."
DEFAULT_NOTIFICATION_MESSAGE = "You have a new notification"


def build_notice(
    kind: NoticeKind, event_type: str, payload
) -> Optional[Notice]:
    """
    Build the notice for an event.

    Args:
        kind: Notice kind from the policy
        event_type: Wire event name
        payload: Parsed payload

    Returns:
        Notice, or None when the kind produces no message
    """
    if kind == NoticeKind.NOTIFICATION and isinstance(payload, NotificationPayload):
        return Notice(
            title=payload.message or DEFAULT_NOTIFICATION_MESSAGE,
            level=NoticeLevel.INFO,
            event_type=event_type,
            emoji=Emoji.MESSAGE.NOTIFICATION,
        )

    if not isinstance(payload, OrderEventPayload):
        return None
    number = payload.display_number or "?"

    if kind == NoticeKind.STATUS:
        if payload.title or payload.body:
            return Notice(
                title=payload.title or DEFAULT_STATUS_TITLE,
                body=payload.body,
                event_type=event_type,
                emoji=Emoji.ORDER.STATUS,
            )
        template = STATUS_MESSAGES.get(payload.status or "")
        if template is not None:
            emoji, title, body = template
            return Notice(
                title=title,
                body=body.format(
                    driver=payload.driver_name or "A driver", number=number
                ),
                event_type=event_type,
                emoji=emoji,
            )
        return Notice(
            title=DEFAULT_STATUS_TITLE,
            body=DEFAULT_STATUS_BODY,
            event_type=event_type,
            emoji=Emoji.ORDER.STATUS,
        )

    if kind == NoticeKind.NEW_ORDER:
        return Notice(
            title="New order received",
            body=f"Order #{number}",
            level=NoticeLevel.SUCCESS,
            event_type=event_type,
            emoji=Emoji.ORDER.NEW_ORDER,
        )
    if kind == NoticeKind.CANCELLED:
        return Notice(
            title="Order cancelled",
            body=f"Order #{number} was cancelled",
            level=NoticeLevel.ERROR,
            event_type=event_type,
            emoji=Emoji.ORDER.CANCELLED,
        )
    if kind == NoticeKind.PICKING_COMPLETED:
        return Notice(
            title="Order picked",
            body=f"Order #{number} is ready",
            level=NoticeLevel.SUCCESS,
            event_type=event_type,
            emoji=Emoji.ORDER.PICKING_COMPLETED,
        )
    return None


class NoticeSink(ABC):
    """Destination of notices (a toast area in a UI)."""

    @abstractmethod
    def show(self, notice: Notice) -> None:
        """Display a notice."""


class ReporterNoticeSink(NoticeSink):
    """Writes notices to the SystemReporter."""

    def __init__(self, reporter: SystemReporter):
        self.reporter = reporter

    def show(self, notice: Notice) -> None:
        if notice.level == NoticeLevel.ERROR:
            self.reporter.warning(notice.render(), context="Notice")
        else:
            self.reporter.info(notice.render(), context="Notice")


class CollectingNoticeSink(NoticeSink):
    """Keeps the most recent notices in memory, optionally forwarding them."""

    def __init__(self, history: int = 50, forward: Optional[NoticeSink] = None):
        self.forward = forward
        self._notices: Deque[Notice] = deque(maxlen=history)

    def show(self, notice: Notice) -> None:
        self._notices.append(notice)
        if self.forward is not None:
            self.forward.show(notice)

    @property
    def notices(self) -> List[Notice]:
        """Notices, oldest first."""
        return list(self._notices)

    def clear(self) -> None:
        self._notices.clear()

    def __len__(self) -> int:
        return len(self._notices)
