"""Schema for notification details."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class NotificationDetail(BaseSchemaModel):
    """Schema for notification details.

    ``delivery_status`` maps each channel (push, email, sms, in_app) to its
    current status.
    """

    notification_id: UUID = Field(
        ..., description="Unique identifier for the notification"
    )
    recipient_id: str = Field(..., description="Recipient user ID")
    type: str
    subtype: str
    category: str
    priority: str
    channel: str
    title: str
    body: str
    data: dict[str, Any]
    delivery_status: dict[str, str] = Field(
        ..., description="Delivery status keyed by channel"
    )
    read: bool
    clicked: bool
    dismissed: bool
    action_taken: str | None = None
    read_at: datetime | None = None
    clicked_at: datetime | None = None
    dismissed_at: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    retry_count: int = Field(..., ge=0)
    last_retry_at: datetime | None = None
    batch_id: UUID | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
