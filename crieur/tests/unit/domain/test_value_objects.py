"""
Unit tests for value objects.

Tests ConnectionState, EventType normalization, Event and Credential.

Usage:
    pytest crieur/tests/unit/domain/test_value_objects.py
"""

from dataclasses import FrozenInstanceError

from shared.tests import LaborantTest

from crieur.domain.exceptions import InvalidEventTypeError
from crieur.domain.value_objects import (
    WILDCARD,
    ConnectionState,
    Credential,
    Event,
    EventType,
    normalize_event_type,
)


class TestValueObjects(LaborantTest):
    """Unit tests for domain value objects."""

    component_name = "crieur"
    test_category = "unit"

    # ================================================================
    # ConnectionState
    # ================================================================

    def test_live_states(self):
        """Test is_live."""
        assert ConnectionState.CONNECTING.is_live()
        assert ConnectionState.CONNECTED.is_live()
        assert not ConnectionState.DISCONNECTED.is_live()
        assert not ConnectionState.FAILED.is_live()

    # ================================================================
    # EventType
    # ================================================================

    def test_event_type_wire_names(self):
        """Test EventType values match the backend event names."""
        self.reporter.info("Testing event wire names", context="Test")

        assert EventType.ORDER_STATUS_CHANGED == "orderStatusChanged"
        assert EventType.NEW_ORDER == "newOrder"
        assert EventType.DELIVERY_ASSIGNED == "deliveryAssigned"
        assert EventType.ORDER_CANCELLED == "orderCancelled"
        assert EventType.NOTIFICATION == "notification"
        assert EventType.ORDER_ITEM_PICKED == "order:item-picked"
        assert str(EventType.MARK_AS_READ) == "markAsRead"

    def test_normalize_event_type(self):
        """Test enum members and strings normalize to wire names."""
        assert normalize_event_type(EventType.NEW_ORDER) == "newOrder"
        assert normalize_event_type("customEvent") == "customEvent"
        assert normalize_event_type(WILDCARD) == "*"

    def test_normalize_rejects_empty_and_non_strings(self):
        """Test invalid event types raise InvalidEventTypeError."""
        self.reporter.info("Testing invalid event types", context="Test")

        for bad in ("", "   ", None, 42):
            try:
                normalize_event_type(bad)
                assert False, f"Should have rejected {bad!r}"
            except InvalidEventTypeError as e:
                assert e.event_type == bad

        self.reporter.info("Invalid event types rejected", context="Test")

    # ================================================================
    # Event
    # ================================================================

    def test_event_defaults_and_get(self):
        """Test Event defaults."""
        event = Event(type="newOrder", payload={"orderId": "1"})

        assert event.sequence == 0
        assert event.received_at.tzinfo is not None
        assert event.get("orderId") == "1"
        assert event.get("missing", "x") == "x"

    def test_event_is_immutable(self):
        """Test Event is frozen."""
        event = Event(type="newOrder")

        try:
            event.type = "other"
            assert False, "Event should be frozen"
        except FrozenInstanceError:
            pass

    # ================================================================
    # Credential
    # ================================================================

    def test_credential_flags(self):
        """Test has_* properties."""
        assert not Credential().has_access_token
        assert not Credential().has_refresh_token
        assert Credential("a", "r").has_access_token
        assert Credential("a", "r").has_refresh_token

    def test_rotated_keeps_refresh_when_not_issued(self):
        """Test rotation without a new refresh token keeps the old one."""
        self.reporter.info("Testing credential rotation", context="Test")

        old = Credential(access_token="A1", refresh_token="R1")

        assert old.rotated("A2", "R2") == Credential("A2", "R2")
        assert old.rotated("A2") == Credential("A2", "R1")
        self.reporter.info("Rotation semantics verified", context="Test")

    def test_repr_masks_tokens(self):
        """Test tokens never appear in repr."""
        text = repr(Credential(access_token="secret-a", refresh_token=None))

        assert "secret-a" not in text
        assert "access_token=set" in text
        assert "refresh_token=missing" in text


if __name__ == "__main__":
    TestValueObjects.run_as_main()
