"""Event routing."""

from crieur.application.routing.event_router import (
    EventRouter,
    SubscriptionHandle,
    subscribe,
    unsubscribe,
)

__all__ = ["EventRouter", "SubscriptionHandle", "subscribe", "unsubscribe"]
