"""
In-memory notification list, newest first.
"""

from typing import Callable, Dict, List, Optional

from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.domain.entities import Notification

Listener = Callable[["NotificationStore"], None]


class NotificationStore:
    """
    Bounded, deduplicated notification list.

    Adding a notification whose id is already held is a no-op, so
    redelivered events never produce duplicates.

    Attributes:
        limit: Maximum number of notifications kept (oldest dropped)
    """

    def __init__(self, limit: int = 100, reporter: Optional[SystemReporter] = None):
        self.limit = limit
        self.reporter = reporter

        self._items: List[Notification] = []
        self._by_id: Dict[str, Notification] = {}
        self._listeners: List[Listener] = []

    # ================================================================
    # MUTATIONS
    # ================================================================

    def add(self, notification: Notification) -> bool:
        """
        Prepend a notification.

        Returns:
            False if a notification with the same id is already held
        """
        if notification.id in self._by_id:
            if self.reporter:
                self.reporter.debug(
                    f"{Emoji.MESSAGE.DUPLICATE} Duplicate notification {notification.id}",
                    context="NotificationStore",
                )
            return False

        self._items.insert(0, notification)
        self._by_id[notification.id] = notification

        while self.limit and len(self._items) > self.limit:
            dropped = self._items.pop()
            self._by_id.pop(dropped.id, None)

        self._notify()
        return True

    def mark_as_read(self, notification_id: str) -> bool:
        """
        Mark one notification read.

        Returns:
            True if its read flag changed
        """
        notification = self._by_id.get(str(notification_id))
        if notification is None or not notification.mark_read():
            return False
        if self.reporter:
            self.reporter.debug(
                f"{Emoji.MESSAGE.READ} Notification {notification_id} read",
                context="NotificationStore",
            )
        self._notify()
        return True

    def mark_all_as_read(self) -> int:
        """
        Mark every notification read.

        Returns:
            Number of notifications changed
        """
        changed = sum(1 for n in self._items if n.mark_read())
        if changed:
            self._notify()
        return changed

    def clear(self) -> None:
        self._items.clear()
        self._by_id.clear()
        self._notify()

    # ================================================================
    # READS
    # ================================================================

    @property
    def notifications(self) -> List[Notification]:
        """All notifications, newest first."""
        return list(self._items)

    def get(self, notification_id: str) -> Optional[Notification]:
        return self._by_id.get(str(notification_id))

    def unread(self) -> List[Notification]:
        return [n for n in self._items if not n.read]

    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id) -> bool:
        return str(notification_id) in self._by_id

    # ================================================================
    # LISTENERS
    # ================================================================

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Observe changes; returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                if self.reporter:
                    self.reporter.error(
                        f"{Emoji.ERROR.HANDLER} Store listener failed: {e}",
                        context="NotificationStore",
                    )
