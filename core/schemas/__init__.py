"""Schemas for the core app."""

from core.schemas.batch import (
    BatchCreate,
    BatchDetail,
    CampaignProgress,
    TargetCriteria,
)
from core.schemas.notification import (
    DispatchOutcome,
    MarkClickedRequest,
    NotificationCreate,
    NotificationDetail,
    NotificationFilters,
    NotificationUpdateRequest,
    TemplateNotificationRequest,
    UserNotificationListResponse,
)
from core.schemas.preference import (
    PreferenceDetail,
    PreferenceUpdate,
    ResolvedPreference,
)
from core.schemas.stats import NotificationStats
from core.schemas.template import RenderedContent, TemplateCreate, TemplateDetail

__all__ = [
    "BatchCreate",
    "BatchDetail",
    "CampaignProgress",
    "DispatchOutcome",
    "MarkClickedRequest",
    "NotificationCreate",
    "NotificationDetail",
    "NotificationFilters",
    "NotificationStats",
    "NotificationUpdateRequest",
    "PreferenceDetail",
    "PreferenceUpdate",
    "RenderedContent",
    "ResolvedPreference",
    "TargetCriteria",
    "TemplateCreate",
    "TemplateDetail",
    "TemplateNotificationRequest",
    "UserNotificationListResponse",
]
