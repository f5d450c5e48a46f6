"""
Error and warning level emoji definitions.

Usage:
    >>> from shared.reporter.emojis import ErrorEmoji
    >>> print(f"{ErrorEmoji.HANDLER} Handler raised")
    💥 Handler raised
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class ErrorEmoji(ComponentEmoji):
    """Error levels and warning indicators."""

    # ============================================================
    # Severity Levels
    # ============================================================

    CRITICAL = "🔴"  # Critical error
    ERROR = "❌"  # Operation failed
    WARNING = "⚠️"  # Potential issue

    # ============================================================
    # Recovery
    # ============================================================

    FALLBACK = "↩️"  # Fallback to REST-only mode
    TIMEOUT = "⏱️"  # Operation timeout

    # ============================================================
    # Exceptions
    # ============================================================

    HANDLER = "💥"  # Subscriber handler raised
    VALIDATION_ERROR = "🚫"  # Payload failed validation
    NOT_FOUND = "🔍"  # Resource not found
