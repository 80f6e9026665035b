"""User model."""

from typing import ClassVar

from django.db import models

from core.enums import UserRole


class User(models.Model):
    """Recipient directory entry from the users table.

    This model is unmanaged as the database schema is owned by another service.
    It provides read-only access to the fields needed for audience expansion
    and channel addressing.
    """

    user_id = models.CharField(max_length=128, primary_key=True)
    role = models.CharField(
        max_length=10,
        choices=[(role.value, role.value) for role in UserRole],
        default=UserRole.USER.value,
    )
    email = models.EmailField(max_length=255, blank=True, default="")
    phone_number = models.CharField(max_length=32, blank=True, default="")
    device_tokens = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)
    location = models.CharField(max_length=255, blank=True, default="")
    last_active_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Django model metadata."""

        db_table = "users"
        managed = False  # Schema is managed externally
        ordering: ClassVar[list[str]] = ["user_id"]

    def __str__(self) -> str:
        """Return string representation of user."""
        return f"{self.user_id} ({self.role})"

    def __repr__(self) -> str:
        """Return detailed representation of user."""
        return f"<User(user_id='{self.user_id}', role='{self.role}')>"
