"""
Main Emoji registry class with centralized access to all emoji categories.

Usage:
    >>> from shared.reporter.emojis import Emoji
    >>>
    >>> Emoji.NETWORK.CONNECTED     # "🔗"
    >>> Emoji.AUTH.REFRESH          # "🔄"
    >>> Emoji.SUCCESS               # "✅"
    >>>
    >>> Emoji.format("ORDER", "NEW_ORDER", "Order #42 received")
    '🛒 Order #42 received'
"""

from typing import Dict, Type

from shared.reporter.emojis.auth_emojis import AuthEmoji
from shared.reporter.emojis.base_emojis import ComponentEmoji
from shared.reporter.emojis.errors_emojis import ErrorEmoji
from shared.reporter.emojis.messaging_emojis import MessageEmoji
from shared.reporter.emojis.network_emojis import NetworkEmoji
from shared.reporter.emojis.order_emojis import OrderEmoji
from shared.reporter.emojis.system_emojis import SystemEmoji


class Emoji:
    """
    Central emoji registry with semantic categories.

    Categories:
        SYSTEM: Session lifecycle and maintenance
        AUTH: Credential and token refresh
        NETWORK: Socket and HTTP traffic
        ORDER: Order events
        MESSAGE: Notifications and notices
        ERROR: Error levels and recovery
    """

    # ============================================================
    # Emoji Categories
    # ============================================================

    SYSTEM = SystemEmoji
    AUTH = AuthEmoji
    NETWORK = NetworkEmoji
    ORDER = OrderEmoji
    MESSAGE = MessageEmoji
    ERROR = ErrorEmoji

    # ============================================================
    # Common Shortcuts
    # ============================================================

    SUCCESS = "✅"
    FAILURE = "❌"
    INFO = "ℹ️"
    WARNING = "⚠️"
    QUESTION = "❓"

    @classmethod
    def get_all_categories(cls) -> Dict[str, Type[ComponentEmoji]]:
        """
        Get all registered emoji categories.

        Returns:
            Dictionary mapping category name to emoji class
        """
        return {
            name: attr
            for name, attr in vars(cls).items()
            if (
                not name.startswith("_")
                and isinstance(attr, type)
                and issubclass(attr, ComponentEmoji)
            )
        }

    @classmethod
    def get(cls, category: str, name: str, default: str = "❓") -> str:
        """
        Look up an emoji by category and name (case-insensitive).

        Args:
            category: Category name (e.g. "ORDER")
            name: Emoji name (e.g. "NEW_ORDER")
            default: Value returned when the emoji does not exist

        Returns:
            Emoji character or default
        """
        category_class = cls.get_all_categories().get(category.upper())
        if category_class is None:
            return default
        return category_class.get_all().get(name.upper(), default)

    @classmethod
    def format(cls, category: str, name: str, message: str) -> str:
        """
        Prefix a message with an emoji, leaving it unchanged if unknown.

        Args:
            category: Category name
            name: Emoji name
            message: Message text

        Returns:
            Formatted message
        """
        emoji = cls.get(category, name, default="")
        if not emoji:
            return message
        return f"{emoji} {message}"
