"""Enumerations for the core app."""

from core.enums.notification import (
    BatchStatus,
    DeferralReason,
    DeliveryChannel,
    DeliveryStatus,
    Frequency,
    NotificationPriority,
    NotificationType,
    StatsPeriod,
)
from core.enums.user_role import UserRole

__all__ = [
    "BatchStatus",
    "DeferralReason",
    "DeliveryChannel",
    "DeliveryStatus",
    "Frequency",
    "NotificationPriority",
    "NotificationType",
    "StatsPeriod",
    "UserRole",
]
