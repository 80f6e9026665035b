"""URL routing configuration for the notification engine."""

from django.urls import path

from .views import (
    BatchCancelView,
    BatchDetailView,
    BatchListView,
    BatchStartView,
    DeliveryReceiptView,
    MarkAllReadView,
    MarkClickedView,
    MarkDismissedView,
    MarkReadView,
    NotificationDetailView,
    NotificationListView,
    NotificationStatsView,
    PreferenceDetailView,
    PreferenceListView,
    TemplateDetailView,
    TemplateListView,
    TemplateNotificationView,
)

urlpatterns = [
    # Notification endpoints (specific routes before generic)
    path("notifications", NotificationListView.as_view(), name="notification-list"),
    path(
        "notifications/from-template",
        TemplateNotificationView.as_view(),
        name="notification-from-template",
    ),
    path(
        "notifications/read-all",
        MarkAllReadView.as_view(),
        name="notification-read-all",
    ),
    path(
        "notifications/<str:notification_id>",
        NotificationDetailView.as_view(),
        name="notification-detail",
    ),
    path(
        "notifications/<str:notification_id>/read",
        MarkReadView.as_view(),
        name="notification-read",
    ),
    path(
        "notifications/<str:notification_id>/clicked",
        MarkClickedView.as_view(),
        name="notification-clicked",
    ),
    path(
        "notifications/<str:notification_id>/dismissed",
        MarkDismissedView.as_view(),
        name="notification-dismissed",
    ),
    path(
        "notifications/<str:notification_id>/delivery/<str:channel>",
        DeliveryReceiptView.as_view(),
        name="notification-delivery",
    ),
    # Template endpoints
    path("templates", TemplateListView.as_view(), name="template-list"),
    path(
        "templates/<str:template_id>",
        TemplateDetailView.as_view(),
        name="template-detail",
    ),
    # Preference endpoints
    path("preferences", PreferenceListView.as_view(), name="preference-list"),
    path(
        "preferences/<str:notification_type>",
        PreferenceDetailView.as_view(),
        name="preference-detail",
    ),
    # Campaign endpoints
    path("batches", BatchListView.as_view(), name="batch-list"),
    path("batches/<str:batch_id>", BatchDetailView.as_view(), name="batch-detail"),
    path(
        "batches/<str:batch_id>/start",
        BatchStartView.as_view(),
        name="batch-start",
    ),
    path(
        "batches/<str:batch_id>/cancel",
        BatchCancelView.as_view(),
        name="batch-cancel",
    ),
    # Statistics
    path("stats", NotificationStatsView.as_view(), name="notification-stats"),
]
