"""
Domain exceptions for Crieur.
"""

from crieur.domain.exceptions.auth_exceptions import (
    AuthenticationError,
    CredentialMissingError,
    RefreshFailedError,
    TokenExpiredError,
)
from crieur.domain.exceptions.channel_exceptions import (
    ChannelClosedError,
    ChannelConnectionError,
    ChannelError,
    HandshakeRejectedError,
)
from crieur.domain.exceptions.subscription_exceptions import (
    InvalidEventTypeError,
    ReconciliationError,
    SubscriptionError,
)

__all__ = [
    "AuthenticationError",
    "CredentialMissingError",
    "RefreshFailedError",
    "TokenExpiredError",
    "ChannelError",
    "ChannelConnectionError",
    "HandshakeRejectedError",
    "ChannelClosedError",
    "SubscriptionError",
    "InvalidEventTypeError",
    "ReconciliationError",
]
