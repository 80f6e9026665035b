"""Unit tests for URL routing."""

from django.test import SimpleTestCase
from django.urls import resolve, reverse

from core import views

PREFIX = "/api/v1/notification-engine"


class TestEngineURLPatterns(SimpleTestCase):
    """Tests for the engine API routes."""

    def test_routes_resolve_to_views(self):
        """Test each public route reaches the expected view."""
        cases = {
            "/notifications": views.NotificationListView,
            "/notifications/from-template": views.TemplateNotificationView,
            "/notifications/read-all": views.MarkAllReadView,
            "/notifications/n1": views.NotificationDetailView,
            "/notifications/n1/read": views.MarkReadView,
            "/notifications/n1/clicked": views.MarkClickedView,
            "/notifications/n1/dismissed": views.MarkDismissedView,
            "/notifications/n1/delivery/sms": views.DeliveryReceiptView,
            "/templates": views.TemplateListView,
            "/templates/welcome": views.TemplateDetailView,
            "/preferences": views.PreferenceListView,
            "/preferences/system": views.PreferenceDetailView,
            "/batches": views.BatchListView,
            "/batches/b1": views.BatchDetailView,
            "/batches/b1/start": views.BatchStartView,
            "/batches/b1/cancel": views.BatchCancelView,
            "/stats": views.NotificationStatsView,
        }
        for path, view in cases.items():
            with self.subTest(path=path):
                self.assertEqual(resolve(PREFIX + path).func.view_class, view)

    def test_literal_routes_win_over_ids(self):
        """Test read-all is not captured as a notification ID."""
        match = resolve(f"{PREFIX}/notifications/read-all")

        self.assertEqual(match.url_name, "notification-read-all")

    def test_reverse_captures(self):
        """Test reversing routes with parameters."""
        self.assertEqual(
            reverse(
                "notification-delivery",
                kwargs={"notification_id": "n1", "channel": "push"},
            ),
            f"{PREFIX}/notifications/n1/delivery/push",
        )
        self.assertEqual(
            reverse("batch-start", kwargs={"batch_id": "b1"}),
            f"{PREFIX}/batches/b1/start",
        )

    def test_admin_is_mounted(self):
        """Test the Django admin index."""
        self.assertEqual(reverse("admin:index"), "/admin/")
