"""Schema for creating a notification template."""

from typing import Any

from pydantic import Field, field_validator

from core.enums import NotificationPriority, NotificationType
from core.schemas.base_schema_model import BaseSchemaModel


class TemplateCreate(BaseSchemaModel):
    """Schema for a new reusable template.

    ``localization`` maps a locale code to ``{"title": ..., "body": ...}``.
    """

    template_id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    type: NotificationType
    subtype: str = ""
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)
    default_data: dict[str, Any] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.NORMAL
    channel: str = ""
    category: str = ""
    allow_customization: bool = False
    requires_auth: bool = False
    max_retries: int = Field(3, ge=0, le=10)
    retry_delay_minutes: int = Field(5, ge=0)
    expiry_hours: int = Field(0, ge=0, description="0 means never expire")
    localization: dict[str, dict[str, str]] = Field(default_factory=dict)
    is_active: bool = True

    @field_validator("localization")
    @classmethod
    def validate_localization(
        cls, value: dict[str, dict[str, str]]
    ) -> dict[str, dict[str, str]]:
        """Every locale entry must provide both title and body."""
        for locale, texts in value.items():
            missing = {"title", "body"} - set(texts)
            if missing:
                raise ValueError(
                    f"Locale '{locale}' is missing {', '.join(sorted(missing))}"
                )
        return value
