"""Schema for paginated user notification list response."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel
from core.schemas.notification.notification_detail import NotificationDetail


class UserNotificationListResponse(BaseSchemaModel):
    """Paginated list of user notifications.

    Returned by GET /notifications.
    """

    notifications: list[NotificationDetail] = Field(
        ..., description="List of notifications"
    )
    total_count: int = Field(
        ..., ge=0, description="Total number of notifications matching the query"
    )
    unread_count: int = Field(
        ..., ge=0, description="Unread notifications of the recipient"
    )
    limit: int = Field(..., ge=1, description="Maximum number of results per page")
    offset: int = Field(..., ge=0, description="Number of results skipped")
