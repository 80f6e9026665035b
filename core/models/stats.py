"""Stored statistics snapshots."""

from typing import ClassVar

from django.db import models
from django.utils import timezone

from core.enums import StatsPeriod


class NotificationStatsSnapshot(models.Model):
    """Aggregate counts for one recipient (or globally) over one period.

    Written only by the statistics aggregator.
    """

    recipient_id = models.CharField(
        max_length=128,
        null=True,
        blank=True,
        help_text="Recipient the counts cover, NULL for global",
    )
    period = models.CharField(
        max_length=10,
        choices=[(p.value, p.value) for p in StatsPeriod],
    )
    period_start = models.DateField()
    total = models.PositiveIntegerField(default=0)
    read = models.PositiveIntegerField(default=0)
    clicked = models.PositiveIntegerField(default=0)
    dismissed = models.PositiveIntegerField(default=0)
    by_type = models.JSONField(default=dict, blank=True)
    by_channel = models.JSONField(default=dict, blank=True)
    by_priority = models.JSONField(default=dict, blank=True)
    computed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        """Django model metadata."""

        db_table = "notification_stats"
        ordering: ClassVar[list[str]] = ["-period_start"]
        constraints: ClassVar[list] = [
            models.UniqueConstraint(
                fields=["recipient_id", "period", "period_start"],
                name="unique_stats_snapshot",
            ),
        ]

    def __str__(self) -> str:
        """Return string representation of snapshot."""
        scope = self.recipient_id or "global"
        return f"{scope} {self.period} {self.period_start}"
