"""Data access layer for the notification engine."""

from core.repositories.batch_repository import NotificationBatchRepository
from core.repositories.notification_repository import NotificationRepository
from core.repositories.user_repository import UserRepository

__all__ = ["NotificationBatchRepository", "NotificationRepository", "UserRepository"]
