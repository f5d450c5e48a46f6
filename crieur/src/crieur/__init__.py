"""
Crieur - real-time order notifications client.

Keeps one authenticated Socket.IO channel per session, fans order events
out to subscribers and reconciles them with REST-fetched state.

Usage:
    >>> from crieur import Container, load_config
    >>> container = Container(load_config(env="development"))
    >>> channel = await container.session.start()
"""

from crieur.application.reconciliation import (
    NotificationStore,
    Profile,
    QueryCache,
    ReconciliationPolicy,
    Reconciler,
)
from crieur.application.routing import (
    EventRouter,
    SubscriptionHandle,
    subscribe,
    unsubscribe,
)
from crieur.application.session import RealtimeSession
from crieur.config.settings import Settings, get_settings, load_config
from crieur.di import Container
from crieur.domain.entities import Channel, Notification, Subscription
from crieur.domain.value_objects import (
    ConnectionState,
    Credential,
    Event,
    EventType,
)
from crieur.infrastructure.auth import TokenGuard
from crieur.infrastructure.websocket import (
    ConnectionManager,
    get_connection_manager,
    override_connection_manager,
    reset_connection_manager,
)

__version__ = "0.1.0"

__all__ = [
    "Channel",
    "ConnectionManager",
    "ConnectionState",
    "Container",
    "Credential",
    "Event",
    "EventRouter",
    "EventType",
    "Notification",
    "NotificationStore",
    "Profile",
    "QueryCache",
    "RealtimeSession",
    "ReconciliationPolicy",
    "Reconciler",
    "Settings",
    "Subscription",
    "SubscriptionHandle",
    "TokenGuard",
    "get_connection_manager",
    "get_settings",
    "load_config",
    "override_connection_manager",
    "reset_connection_manager",
    "subscribe",
    "unsubscribe",
]
