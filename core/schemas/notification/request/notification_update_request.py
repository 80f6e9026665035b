"""Request schema for partially updating a notification."""

from datetime import datetime
from typing import Any

from pydantic import Field

from core.enums import NotificationPriority
from core.schemas.base_schema_model import BaseSchemaModel


class NotificationUpdateRequest(BaseSchemaModel):
    """Editable notification fields. Only fields present are written."""

    title: str | None = Field(None, min_length=1, max_length=255)
    body: str | None = Field(None, min_length=1)
    data: dict[str, Any] | None = None
    priority: NotificationPriority | None = None
    category: str | None = None
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
