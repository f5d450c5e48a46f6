"""
Order lifecycle emoji definitions.

Used in transient notices and reconciliation logs.
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class OrderEmoji(ComponentEmoji):
    """Order events as seen by the client apps."""

    NEW_ORDER = "🛒"  # New order received
    CANCELLED = "❌"  # Order cancelled
    ASSIGNED = "🚗"  # Driver assigned
    OUT_FOR_DELIVERY = "📦"  # Order on its way
    DELIVERED = "✅"  # Order delivered
    READY_FOR_PICKUP = "🏪"  # Waiting for pickup
    PICKED = "🧺"  # Item picked
    PICKING_COMPLETED = "✅"  # Picking finished
    STATUS = "🔁"  # Generic status change
