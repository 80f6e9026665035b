"""Statistics schemas."""

from core.schemas.stats.notification_stats import NotificationStats

__all__ = ["NotificationStats"]
