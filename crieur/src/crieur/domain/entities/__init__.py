"""Domain entities for Crieur."""

from crieur.domain.entities.channel import Channel
from crieur.domain.entities.notification import Notification
from crieur.domain.entities.subscription import Subscription

__all__ = ["Channel", "Notification", "Subscription"]
