"""Notification model holding one message instance for one recipient.

Delivery state is tracked per channel with one status column per channel
(push, email, sms, in-app). Those columns, the engagement flags and the
campaign outcome flag are only ever changed through conditional updates so
that concurrent dispatch attempts, retries and delivery receipts cannot
overwrite each other.
"""

import uuid
from typing import ClassVar

from django.db import models
from django.utils import timezone

from core.enums import (
    DeferralReason,
    DeliveryChannel,
    DeliveryStatus,
    NotificationPriority,
    NotificationType,
)

DELIVERY_STATUS_CHOICES = [(status.value, status.value) for status in DeliveryStatus]


def _delivery_status_field(channel: str) -> models.CharField:
    return models.CharField(
        max_length=20,
        choices=DELIVERY_STATUS_CHOICES,
        default=DeliveryStatus.PENDING.value,
        help_text=f"Delivery status for the {channel} channel",
    )


class Notification(models.Model):
    """One rendered message owned by exactly one recipient.

    Attributes:
        notification_id: Unique identifier for the notification.
        recipient_id: External ID of the user receiving the notification.
        type: Top-level classification used for preferences and stats.
        subtype: Free-form sub-category (e.g. ``session_reminder``).
        category: Grouping key for the UI.
        priority: low, normal, high or urgent.
        channel: Channel id carried over from the template.
        title: Rendered title.
        body: Rendered body.
        data: Opaque structured payload forwarded to providers.
        push_status/email_status/sms_status/in_app_status: Per-channel state.
        read/clicked/dismissed: Engagement flags with matching timestamps.
        scheduled_for: Caller-requested send time.
        expires_at: After this instant the expiry sweeper purges the row.
        deferred_until: When held-back pending channels become due again.
        retry_count: Completed retry rounds.
        retry_channels: Channels waiting for the next retry round.
        outcome_recorded: Whether the owning batch counters were settled.
        metadata: Source user, related entity, campaign/template ids and the
            addresses or tokens used for each channel attempt.
    """

    notification_id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the notification",
    )
    recipient_id = models.CharField(
        max_length=128,
        help_text="External ID of the recipient user",
    )
    type = models.CharField(
        max_length=20,
        choices=[(t.value, t.value) for t in NotificationType],
        help_text="Notification type (message, session, community, ...)",
    )
    subtype = models.CharField(max_length=100, blank=True, default="")
    category = models.CharField(max_length=100, blank=True, default="")
    priority = models.CharField(
        max_length=10,
        choices=[(p.value, p.value) for p in NotificationPriority],
        default=NotificationPriority.NORMAL.value,
    )
    channel = models.CharField(max_length=100, blank=True, default="")
    title = models.CharField(max_length=255)
    body = models.TextField()
    data = models.JSONField(default=dict, blank=True)

    push_status = _delivery_status_field("push")
    email_status = _delivery_status_field("email")
    sms_status = _delivery_status_field("sms")
    in_app_status = _delivery_status_field("in-app")

    read = models.BooleanField(default=False)
    clicked = models.BooleanField(default=False)
    dismissed = models.BooleanField(default=False)
    action_taken = models.CharField(max_length=255, null=True, blank=True)
    read_at = models.DateTimeField(null=True, blank=True)
    clicked_at = models.DateTimeField(null=True, blank=True)
    dismissed_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Set when the first channel reports delivery",
    )

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)
    scheduled_for = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    deferred_until = models.DateTimeField(null=True, blank=True)
    deferred_reason = models.CharField(
        max_length=20,
        choices=[(r.value, r.value) for r in DeferralReason],
        null=True,
        blank=True,
    )

    batch = models.ForeignKey(
        "core.NotificationBatch",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
        help_text="Campaign batch this notification was sent for",
    )
    max_retries = models.PositiveIntegerField(default=3)
    retry_delay_minutes = models.PositiveIntegerField(default=5)
    retry_count = models.PositiveIntegerField(default=0)
    last_retry_at = models.DateTimeField(null=True, blank=True)
    retry_channels = models.JSONField(default=list, blank=True)
    delivery_errors = models.JSONField(default=dict, blank=True)
    outcome_recorded = models.BooleanField(default=False)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        """Django model metadata."""

        db_table = "notifications"
        ordering: ClassVar[list[str]] = ["-created_at"]
        indexes: ClassVar[list] = [
            models.Index(fields=["recipient_id", "-created_at"]),
            models.Index(fields=["recipient_id", "read"]),
            models.Index(fields=["expires_at"]),
            models.Index(fields=["deferred_until"]),
            models.Index(fields=["batch"]),
        ]

    def __str__(self) -> str:
        """Return string representation of notification."""
        return f"{self.type}/{self.subtype} for {self.recipient_id}"

    def __repr__(self) -> str:
        """Return detailed representation of notification."""
        return (
            f"<Notification(id={self.notification_id}, "
            f"type={self.type}, "
            f"recipient={self.recipient_id}, "
            f"read={self.read})>"
        )

    def get_status(self, channel: DeliveryChannel) -> DeliveryStatus:
        """Return the delivery status of one channel."""
        return DeliveryStatus(getattr(self, channel.status_field))

    @property
    def delivery_status(self) -> dict[str, str]:
        """Delivery status keyed by channel name."""
        return {
            channel.value: getattr(self, channel.status_field)
            for channel in DeliveryChannel
        }

    def pending_channels(self) -> list[DeliveryChannel]:
        """Channels still waiting for a send attempt or retry."""
        return [
            channel
            for channel in DeliveryChannel
            if self.get_status(channel) == DeliveryStatus.PENDING
        ]
