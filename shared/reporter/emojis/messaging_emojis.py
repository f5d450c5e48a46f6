"""
Notification and notice emoji definitions.

Usage:
    >>> from shared.reporter.emojis import MessageEmoji
    >>> print(f"{MessageEmoji.NOTIFICATION} Notification stored")
    🔔 Notification stored
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class MessageEmoji(ComponentEmoji):
    """User-facing notifications and notices."""

    # ============================================================
    # Message Types
    # ============================================================

    NOTIFICATION = "🔔"  # Notification appended
    ALERT = "🚨"  # Urgent notice
    INFO = "ℹ️"  # Informational notice
    WARNING = "⚠️"  # Warning notice
    SUCCESS = "✅"  # Success notice

    # ============================================================
    # Store Operations
    # ============================================================

    READ = "📖"  # Marked as read
    DUPLICATE = "♊"  # Duplicate delivery ignored
    CLEARED = "🧹"  # Store cleared
    SUBSCRIBE = "📝"  # Subscription registered
    UNSUBSCRIBE = "📤"  # Subscription removed
