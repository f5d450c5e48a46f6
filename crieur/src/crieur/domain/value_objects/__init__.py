"""Value objects for Crieur."""

from crieur.domain.value_objects.connection_state import ConnectionState
from crieur.domain.value_objects.credential import Credential
from crieur.domain.value_objects.event import Event
from crieur.domain.value_objects.event_type import (
    WILDCARD,
    EventType,
    normalize_event_type,
)

__all__ = [
    "ConnectionState",
    "Credential",
    "Event",
    "EventType",
    "WILDCARD",
    "normalize_event_type",
]
