"""Campaign batch model."""

import uuid
from typing import ClassVar

from django.db import models
from django.utils import timezone

from core.enums import BatchStatus


class NotificationBatch(models.Model):
    """One bulk send definition and its running progress.

    Progress counters are only changed through ``F()`` updates in
    ``NotificationBatchRepository``. Once the audience is expanded,
    ``progress_sent + progress_failed + progress_pending == progress_total``
    holds at every point, and ``progress_delivered <= progress_sent``.
    """

    batch_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    template = models.ForeignKey(
        "core.NotificationTemplate",
        on_delete=models.PROTECT,
        related_name="batches",
    )
    target_users = models.JSONField(default=list, blank=True)
    target_criteria = models.JSONField(
        default=dict,
        blank=True,
        help_text="Filter with roles, tags, locations and last_active_after",
    )
    placeholders = models.JSONField(default=dict, blank=True)
    custom_data = models.JSONField(default=dict, blank=True)

    status = models.CharField(
        max_length=10,
        choices=[(s.value, s.value) for s in BatchStatus],
        default=BatchStatus.DRAFT.value,
    )
    scheduled_for = models.DateTimeField(null=True, blank=True)

    progress_total = models.PositiveIntegerField(default=0)
    progress_sent = models.PositiveIntegerField(default=0)
    progress_delivered = models.PositiveIntegerField(default=0)
    progress_failed = models.PositiveIntegerField(default=0)
    progress_pending = models.PositiveIntegerField(default=0)

    respect_quiet_hours = models.BooleanField(default=True)
    respect_preferences = models.BooleanField(default=True)
    max_retries = models.PositiveIntegerField(null=True, blank=True)
    batch_size = models.PositiveIntegerField(default=100)
    delay_between_batches = models.PositiveIntegerField(
        default=0,
        help_text="Seconds to wait between chunks",
    )

    created_by = models.CharField(max_length=128, blank=True, default="")
    error_message = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        """Django model metadata."""

        db_table = "batches"
        ordering: ClassVar[list[str]] = ["-created_at"]
        indexes: ClassVar[list] = [
            models.Index(fields=["status", "scheduled_for"]),
        ]

    def __str__(self) -> str:
        """Return string representation of batch."""
        return f"{self.name} ({self.status})"

    def __repr__(self) -> str:
        """Return detailed representation of batch."""
        return (
            f"<NotificationBatch(batch_id={self.batch_id}, "
            f"status={self.status}, "
            f"total={self.progress_total})>"
        )

    @property
    def batch_status(self) -> BatchStatus:
        """Status as an enum member."""
        return BatchStatus(self.status)
