"""
Event value object - one inbound message from the channel.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict


@dataclass(frozen=True)
class Event:
    """
    Inbound event as received from the transport.

    Attributes:
        type: Wire name of the event
        payload: Raw payload (shape depends on type)
        sequence: Arrival counter on the channel that received it
        received_at: Arrival timestamp (UTC)
    """

    type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    sequence: int = 0
    received_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Read a payload field."""
        return self.payload.get(key, default)
