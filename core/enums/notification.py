"""Notification-related enumerations.

This module contains enums for notification types, priorities, delivery
channels and statuses, preference frequencies and campaign states used
throughout the notification engine.
"""

from enum import Enum


class NotificationType(str, Enum):
    """Top-level notification classification.

    Preferences are stored per recipient and type, so every type has a
    default preference row (see ``core.constants.preferences``).
    """

    MESSAGE = "message"
    SESSION = "session"
    PROTOTYPE = "prototype"
    COMMUNITY = "community"
    SYSTEM = "system"
    MARKETING = "marketing"
    REMINDER = "reminder"


class NotificationPriority(str, Enum):
    """Notification priority levels."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class DeliveryStatus(str, Enum):
    """Per-channel delivery status values.

    A channel moves forward only: PENDING -> SENT -> DELIVERED, or
    PENDING -> FAILED. NOT_APPLICABLE never transitions.
    """

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"
    NOT_APPLICABLE = "not_applicable"

    @property
    def is_terminal(self) -> bool:
        """Whether no further automatic transition is possible."""
        return self in (
            DeliveryStatus.DELIVERED,
            DeliveryStatus.FAILED,
            DeliveryStatus.NOT_APPLICABLE,
        )


class DeliveryChannel(str, Enum):
    """Delivery channels a notification can be sent through.

    Each channel owns one status column on the Notification model, exposed
    through ``status_field`` so callers never build field names by hand.
    """

    PUSH = "push"
    EMAIL = "email"
    SMS = "sms"
    IN_APP = "in_app"

    @property
    def status_field(self) -> str:
        """Name of the Notification column holding this channel's status."""
        return f"{self.value}_status"

    @property
    def preference_field(self) -> str:
        """Name of the NotificationPreference toggle for this channel."""
        return f"{self.value}_enabled"


class Frequency(str, Enum):
    """How often a recipient wants to receive a notification type."""

    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    NEVER = "never"


class DeferralReason(str, Enum):
    """Why a notification's pending channels were held back."""

    QUIET_HOURS = "quiet_hours"
    FREQUENCY = "frequency"
    SCHEDULED = "scheduled"


class BatchStatus(str, Enum):
    """Campaign batch lifecycle states."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENDING = "sending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether the batch can no longer change state."""
        return self in (
            BatchStatus.COMPLETED,
            BatchStatus.FAILED,
            BatchStatus.CANCELLED,
        )

    def allowed_sources(self) -> tuple["BatchStatus", ...]:
        """States from which a batch may move into this state."""
        return BATCH_TRANSITIONS[self]


BATCH_TRANSITIONS: dict[BatchStatus, tuple[BatchStatus, ...]] = {
    BatchStatus.DRAFT: (),
    BatchStatus.SCHEDULED: (BatchStatus.DRAFT,),
    BatchStatus.SENDING: (BatchStatus.DRAFT, BatchStatus.SCHEDULED),
    BatchStatus.COMPLETED: (BatchStatus.SENDING,),
    BatchStatus.FAILED: (BatchStatus.DRAFT, BatchStatus.SCHEDULED, BatchStatus.SENDING),
    BatchStatus.CANCELLED: (
        BatchStatus.DRAFT,
        BatchStatus.SCHEDULED,
        BatchStatus.SENDING,
    ),
}


class StatsPeriod(str, Enum):
    """Aggregation windows for stored statistics snapshots."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
