"""Notification preference model."""

from typing import ClassVar

from django.db import models
from django.utils.timezone import now

from core.enums import DeliveryChannel, Frequency, NotificationType


class NotificationPreference(models.Model):
    """Delivery preferences of one recipient for one notification type.

    A row with an empty ``subtype`` covers the whole type; a row with a
    subtype overrides it for that subtype only. Quiet hours are stored as
    local times of day interpreted in ``timezone``.
    """

    recipient_id = models.CharField(max_length=128)
    type = models.CharField(
        max_length=20,
        choices=[(t.value, t.value) for t in NotificationType],
    )
    subtype = models.CharField(max_length=100, blank=True, default="")

    push_enabled = models.BooleanField(default=True)
    email_enabled = models.BooleanField(default=True)
    sms_enabled = models.BooleanField(default=False)
    in_app_enabled = models.BooleanField(default=True)

    frequency = models.CharField(
        max_length=10,
        choices=[(f.value, f.value) for f in Frequency],
        default=Frequency.IMMEDIATE.value,
    )
    quiet_hours_enabled = models.BooleanField(default=False)
    quiet_hours_start = models.TimeField(null=True, blank=True)
    quiet_hours_end = models.TimeField(null=True, blank=True)
    timezone = models.CharField(max_length=64, default="UTC")
    keywords = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(default=now)
    updated_at = models.DateTimeField(default=now)

    class Meta:
        """Django model metadata."""

        db_table = "preferences"
        constraints: ClassVar[list] = [
            models.UniqueConstraint(
                fields=["recipient_id", "type", "subtype"],
                name="unique_preference_per_recipient_type",
            ),
        ]

    def __str__(self) -> str:
        """Return string representation of preference."""
        scope = f"{self.type}/{self.subtype}" if self.subtype else self.type
        return f"{self.recipient_id}: {scope}"

    def is_channel_enabled(self, channel: DeliveryChannel) -> bool:
        """Return whether the recipient accepts this channel."""
        return bool(getattr(self, channel.preference_field))

    @property
    def enabled_channels(self) -> frozenset[DeliveryChannel]:
        """Channels switched on in this row."""
        return frozenset(
            channel for channel in DeliveryChannel if self.is_channel_enabled(channel)
        )
