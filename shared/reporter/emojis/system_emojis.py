"""
System-level operations and lifecycle emoji definitions.
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class SystemEmoji(ComponentEmoji):
    """System-level operations and lifecycle events."""

    # ============================================================
    # Lifecycle Operations
    # ============================================================
    STARTUP = "🚀"  # Session start
    SHUTDOWN = "🛑"  # Session stop
    READY = "✅"  # Component initialized successfully
    OFFLINE = "📴"  # Running without live updates

    # ============================================================
    # Configuration
    # ============================================================
    CONFIG = "⚙️"  # Configuration operation
    CONFIG_LOAD = "📋"  # Configuration loading

    # ============================================================
    # Maintenance & Cleanup
    # ============================================================
    CLEANUP = "🧹"  # Resource cleanup
    RESET = "♻️"  # Reset to initial state
    REFETCH = "🔄"  # Cached query refetched
    INVALIDATE = "🗑️"  # Cached query invalidated
