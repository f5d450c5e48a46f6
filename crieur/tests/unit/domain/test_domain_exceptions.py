"""
Unit tests for domain exceptions.

Usage:
    pytest crieur/tests/unit/domain/test_domain_exceptions.py
"""

from shared.tests import LaborantTest

from crieur.domain.exceptions import (
    AuthenticationError,
    ChannelClosedError,
    ChannelConnectionError,
    ChannelError,
    CredentialMissingError,
    HandshakeRejectedError,
    InvalidEventTypeError,
    ReconciliationError,
    RefreshFailedError,
    SubscriptionError,
    TokenExpiredError,
)


class TestDomainExceptions(LaborantTest):
    """Unit tests for the exception hierarchy."""

    component_name = "crieur"
    test_category = "unit"

    def test_auth_hierarchy(self):
        """Test credential errors share a base."""
        self.reporter.info("Testing auth exception hierarchy", context="Test")

        for cls in (CredentialMissingError, TokenExpiredError, RefreshFailedError):
            assert issubclass(cls, AuthenticationError)

    def test_refresh_failed_keeps_status(self):
        """Test RefreshFailedError.status_code."""
        error = RefreshFailedError("Refresh rejected", status_code=401)

        assert error.status_code == 401
        assert str(error) == "Refresh rejected"
        assert RefreshFailedError("timeout").status_code is None

    def test_connection_error_message(self):
        """Test ChannelConnectionError attributes."""
        error = ChannelConnectionError("http://api/notifications", "refused")

        assert isinstance(error, ChannelError)
        assert error.url == "http://api/notifications"
        assert error.reason == "refused"
        assert "refused" in str(error)

    def test_handshake_rejected_is_connection_error(self):
        """Test handshake rejection is caught as a connection failure."""
        error = HandshakeRejectedError("http://api/notifications", "Unauthorized")

        assert isinstance(error, ChannelConnectionError)
        assert error.reason == "Unauthorized"

    def test_channel_closed(self):
        """Test ChannelClosedError."""
        error = ChannelClosedError("abc")

        assert error.channel_id == "abc"
        assert "abc" in str(error)

    def test_subscription_errors(self):
        """Test subscription hierarchy."""
        assert issubclass(InvalidEventTypeError, SubscriptionError)
        assert InvalidEventTypeError("").event_type == ""

    def test_reconciliation_error(self):
        """Test ReconciliationError keeps the event type."""
        error = ReconciliationError("bad payload", "newOrder")

        assert error.event_type == "newOrder"
        assert not isinstance(error, SubscriptionError)


if __name__ == "__main__":
    TestDomainExceptions.run_as_main()
