"""
Subscription and reconciliation exceptions.
"""


class SubscriptionError(Exception):
    """Base exception for subscription errors."""

    pass


class InvalidEventTypeError(SubscriptionError):
    """Raised when an event type is empty or not a string."""

    def __init__(self, event_type: object):
        super().__init__(f"Invalid event type: {event_type!r}")
        self.event_type = event_type


class ReconciliationError(Exception):
    """Raised when a reaction cannot be applied to an event."""

    def __init__(self, message: str, event_type: str):
        """
        Initialize ReconciliationError.

        Args:
            message: Error message
            event_type: Event type whose reaction failed
        """
        super().__init__(message)
        self.event_type = event_type
