"""
Unit tests for NotificationStore.

Usage:
    pytest crieur/tests/unit/application/test_notification_store.py
"""

from shared.tests import LaborantTest

from crieur.application.reconciliation import NotificationStore
from crieur.domain.entities import Notification


def make_notification(notification_id: str, read: bool = False) -> Notification:
    return Notification(
        notification_id,
        "info",
        f"message {notification_id}",
        "2024-01-01T00:00:00Z",
        read=read,
    )


class TestNotificationStore(LaborantTest):
    """Unit tests for NotificationStore."""

    component_name = "crieur"
    test_category = "unit"

    def setup_test(self):
        self.store = NotificationStore(limit=3, reporter=self.reporter)

    def test_add_prepends(self):
        """Test newest first."""
        self.store.add(make_notification("1"))
        self.store.add(make_notification("2"))

        assert [n.id for n in self.store.notifications] == ["2", "1"]
        assert "1" in self.store
        assert self.store.get("2").message == "message 2"

    def test_duplicate_ids_ignored(self):
        """Test redelivered notification is dropped."""
        self.reporter.info("Testing notification dedupe", context="Test")

        assert self.store.add(make_notification("1")) is True
        assert self.store.add(make_notification("1")) is False

        assert len(self.store) == 1
        self.reporter.info("Duplicate ignored", context="Test")

    def test_limit_drops_oldest(self):
        """Test bounded list."""
        for n in range(5):
            self.store.add(make_notification(str(n)))

        assert [n.id for n in self.store.notifications] == ["4", "3", "2"]
        assert "0" not in self.store

        # Dropped ids can come back
        assert self.store.add(make_notification("0")) is True

    def test_mark_as_read(self):
        """Test single read flag."""
        self.store.add(make_notification("1"))
        self.store.add(make_notification("2"))

        assert self.store.mark_as_read("1") is True
        assert self.store.mark_as_read("1") is False
        assert self.store.mark_as_read("unknown") is False
        assert self.store.unread_count() == 1
        assert [n.id for n in self.store.unread()] == ["2"]

    def test_mark_all_as_read(self):
        """Test bulk read."""
        self.store.add(make_notification("1"))
        self.store.add(make_notification("2", read=True))

        assert self.store.mark_all_as_read() == 1
        assert self.store.mark_all_as_read() == 0
        assert self.store.unread_count() == 0

    def test_listeners(self):
        """Test change notifications and a failing listener."""
        calls = []

        def broken(store):
            raise RuntimeError("listener boom")

        self.store.add_listener(broken)
        remove = self.store.add_listener(lambda s: calls.append(len(s)))

        self.store.add(make_notification("1"))
        self.store.add(make_notification("1"))
        self.store.mark_as_read("1")
        remove()
        self.store.clear()

        assert calls == [1, 1]
        assert len(self.store) == 0


if __name__ == "__main__":
    TestNotificationStore.run_as_main()
