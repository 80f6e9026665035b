"""Query filters for listing a recipient's notifications."""

from datetime import datetime

from pydantic import Field

from core.enums import NotificationPriority, NotificationType
from core.schemas.base_schema_model import BaseSchemaModel


class NotificationFilters(BaseSchemaModel):
    """Pagination and filter parameters for GET /notifications."""

    limit: int = Field(20, ge=1, le=100, description="Page size")
    offset: int = Field(0, ge=0, description="Rows to skip")
    type: NotificationType | None = None
    read: bool | None = None
    priority: NotificationPriority | None = None
    category: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    def as_query(self) -> dict:
        """Filters without the paging fields."""
        return self.model_dump(exclude={"limit", "offset"}, exclude_none=True)
