"""Database models for core application."""

from core.models.batch import NotificationBatch
from core.models.notification import Notification
from core.models.preference import NotificationPreference
from core.models.stats import NotificationStatsSnapshot
from core.models.template import NotificationTemplate
from core.models.user import User

__all__ = [
    "Notification",
    "NotificationBatch",
    "NotificationPreference",
    "NotificationStatsSnapshot",
    "NotificationTemplate",
    "User",
]
