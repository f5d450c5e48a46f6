"""
Authentication and credential exceptions.
"""

from typing import Optional


class AuthenticationError(Exception):
    """Base exception for credential errors."""

    pass


class CredentialMissingError(AuthenticationError):
    """Raised when no usable access token is available."""

    pass


class TokenExpiredError(AuthenticationError):
    """Raised when an access token is past its expiry."""

    pass


class RefreshFailedError(AuthenticationError):
    """Raised when the refresh endpoint rejects or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        """
        Initialize RefreshFailedError.

        Args:
            message: Error message
            status_code: HTTP status returned by the refresh endpoint, if any
        """
        super().__init__(message)
        self.status_code = status_code
