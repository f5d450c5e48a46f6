"""
Authentication emoji definitions.

Usage:
    >>> from shared.reporter.emojis import AuthEmoji
    >>> print(f"{AuthEmoji.REFRESH} Refreshing access token")
    🔄 Refreshing access token
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class AuthEmoji(ComponentEmoji):
    """Credential handling and token lifecycle."""

    TOKEN = "🔑"  # Credential resolved
    REFRESH = "🔄"  # Refresh in progress
    REFRESHED = "✅"  # Refresh succeeded
    EXPIRED = "⌛"  # Token expired
    MISSING = "📭"  # No credential stored
    REVOKED = "🚫"  # Tokens cleared after failed refresh
    WAITING = "⏳"  # Joined an in-flight refresh
