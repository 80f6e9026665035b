"""Notification template model."""

from typing import ClassVar

from django.db import models
from django.utils import timezone

from core.enums import NotificationPriority, NotificationType


class NotificationTemplate(models.Model):
    """Reusable message blueprint keyed by a string id.

    Title and body carry ``{{placeholder}}`` tokens that the renderer
    replaces at creation time. Templates are not versioned: edits only
    affect notifications rendered afterwards.
    """

    template_id = models.CharField(max_length=100, primary_key=True)
    name = models.CharField(max_length=255)
    type = models.CharField(
        max_length=20,
        choices=[(t.value, t.value) for t in NotificationType],
    )
    subtype = models.CharField(max_length=100, blank=True, default="")
    title = models.CharField(max_length=255)
    body = models.TextField()
    default_data = models.JSONField(default=dict, blank=True)
    priority = models.CharField(
        max_length=10,
        choices=[(p.value, p.value) for p in NotificationPriority],
        default=NotificationPriority.NORMAL.value,
    )
    channel = models.CharField(max_length=100, blank=True, default="")
    category = models.CharField(max_length=100, blank=True, default="")

    allow_customization = models.BooleanField(default=False)
    requires_auth = models.BooleanField(default=False)
    max_retries = models.PositiveIntegerField(default=3)
    retry_delay_minutes = models.PositiveIntegerField(default=5)
    expiry_hours = models.PositiveIntegerField(
        default=0,
        help_text="Hours until issued notifications expire (0 = never)",
    )
    localization = models.JSONField(
        default=dict,
        blank=True,
        help_text="Locale code mapped to {title, body} overrides",
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        """Django model metadata."""

        db_table = "templates"
        ordering: ClassVar[list[str]] = ["template_id"]
        indexes: ClassVar[list] = [
            models.Index(fields=["type", "is_active"]),
        ]

    def __str__(self) -> str:
        """Return string representation of template."""
        return f"{self.template_id} ({self.type})"

    def __repr__(self) -> str:
        """Return detailed representation of template."""
        return (
            f"<NotificationTemplate(template_id='{self.template_id}', "
            f"type={self.type}, active={self.is_active})>"
        )
