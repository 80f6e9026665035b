"""Schema for notification statistics."""

from datetime import datetime

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class NotificationStats(BaseSchemaModel):
    """Read/click/dismiss counts and breakdowns over a window.

    ``by_channel`` maps each channel to a count per delivery status.
    """

    recipient_id: str | None = Field(None, description="NULL for global stats")
    start_date: datetime | None = None
    end_date: datetime | None = None
    total: int = Field(0, ge=0)
    read: int = Field(0, ge=0)
    clicked: int = Field(0, ge=0)
    dismissed: int = Field(0, ge=0)
    by_type: dict[str, int] = Field(default_factory=dict)
    by_channel: dict[str, dict[str, int]] = Field(default_factory=dict)
    by_priority: dict[str, int] = Field(default_factory=dict)
