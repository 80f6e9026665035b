"""Schema for creating a notification directly, without a template."""

from datetime import datetime
from typing import Any

from pydantic import Field

from core.enums import DeliveryChannel, NotificationPriority, NotificationType
from core.schemas.base_schema_model import BaseSchemaModel


class NotificationCreate(BaseSchemaModel):
    """Schema for system-generated notifications that bypass templating.

    Channels left out of ``channels`` start as ``not_applicable``. Retry
    settings fall back to the engine configuration when omitted.
    """

    recipient_id: str = Field(..., min_length=1, description="Recipient user ID")
    type: NotificationType = Field(..., description="Notification type")
    subtype: str = Field("", description="Free-form sub-category")
    category: str = Field("", description="Grouping key for the UI")
    priority: NotificationPriority = Field(
        NotificationPriority.NORMAL, description="Delivery priority"
    )
    channel: str = Field("", description="Channel id used for UI grouping")
    title: str = Field(..., min_length=1, max_length=255, description="Title")
    body: str = Field(..., min_length=1, description="Body text")
    data: dict[str, Any] = Field(default_factory=dict, description="Payload")
    channels: list[DeliveryChannel] | None = Field(
        None, description="Channels to target (all four when omitted)"
    )
    scheduled_for: datetime | None = Field(None, description="Requested send time")
    expires_at: datetime | None = Field(None, description="Purge after this time")
    max_retries: int | None = Field(None, ge=0, le=10)
    retry_delay_minutes: int | None = Field(None, ge=0)
    source_user_id: str | None = Field(None, description="User who triggered it")
    related_entity_id: str | None = Field(None, description="Related entity ID")
    related_entity_type: str | None = Field(None, description="Related entity type")
    dispatch: bool = Field(True, description="Dispatch immediately after creation")
