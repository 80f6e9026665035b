"""Recipient-independent default notification preferences.

A preference row is materialized from these defaults the first time a
recipient's preferences for a type are resolved.
"""

from datetime import time
from typing import TypedDict

from core.enums import Frequency, NotificationType


class DefaultPreference(TypedDict):
    """Default values for one notification type."""

    push_enabled: bool
    email_enabled: bool
    sms_enabled: bool
    in_app_enabled: bool
    frequency: str
    quiet_hours_enabled: bool


DEFAULT_QUIET_HOURS_START = time(22, 0)
DEFAULT_QUIET_HOURS_END = time(8, 0)
DEFAULT_TIMEZONE = "UTC"

DEFAULT_PREFERENCES: dict[str, DefaultPreference] = {
    NotificationType.MESSAGE.value: {
        "push_enabled": True,
        "email_enabled": True,
        "sms_enabled": False,
        "in_app_enabled": True,
        "frequency": Frequency.IMMEDIATE.value,
        "quiet_hours_enabled": True,
    },
    NotificationType.SESSION.value: {
        "push_enabled": True,
        "email_enabled": True,
        "sms_enabled": True,
        "in_app_enabled": True,
        "frequency": Frequency.IMMEDIATE.value,
        "quiet_hours_enabled": False,
    },
    NotificationType.COMMUNITY.value: {
        "push_enabled": True,
        "email_enabled": False,
        "sms_enabled": False,
        "in_app_enabled": True,
        "frequency": Frequency.HOURLY.value,
        "quiet_hours_enabled": True,
    },
    NotificationType.SYSTEM.value: {
        "push_enabled": True,
        "email_enabled": True,
        "sms_enabled": False,
        "in_app_enabled": True,
        "frequency": Frequency.IMMEDIATE.value,
        "quiet_hours_enabled": False,
    },
    NotificationType.PROTOTYPE.value: {
        "push_enabled": True,
        "email_enabled": False,
        "sms_enabled": False,
        "in_app_enabled": True,
        "frequency": Frequency.IMMEDIATE.value,
        "quiet_hours_enabled": True,
    },
    NotificationType.REMINDER.value: {
        "push_enabled": True,
        "email_enabled": True,
        "sms_enabled": False,
        "in_app_enabled": True,
        "frequency": Frequency.IMMEDIATE.value,
        "quiet_hours_enabled": False,
    },
    NotificationType.MARKETING.value: {
        "push_enabled": False,
        "email_enabled": True,
        "sms_enabled": False,
        "in_app_enabled": True,
        "frequency": Frequency.WEEKLY.value,
        "quiet_hours_enabled": True,
    },
}
