"""Notification schemas."""

from core.schemas.notification.dispatch_outcome import DispatchOutcome
from core.schemas.notification.notification_create import NotificationCreate
from core.schemas.notification.notification_detail import NotificationDetail
from core.schemas.notification.notification_filters import NotificationFilters
from core.schemas.notification.request.mark_clicked_request import (
    MarkClickedRequest,
)
from core.schemas.notification.request.notification_update_request import (
    NotificationUpdateRequest,
)
from core.schemas.notification.request.template_notification_request import (
    TemplateNotificationRequest,
)
from core.schemas.notification.response.user_notification_list_response import (
    UserNotificationListResponse,
)

__all__ = [
    "DispatchOutcome",
    "MarkClickedRequest",
    "NotificationCreate",
    "NotificationDetail",
    "NotificationFilters",
    "NotificationUpdateRequest",
    "TemplateNotificationRequest",
    "UserNotificationListResponse",
]
