"""Component tests for the statistics endpoint."""

from django.test import Client, TestCase

from core.enums import DeliveryStatus
from tests.factories import create_notification, utc

URL = "/api/v1/notification-engine/stats"


class TestStatsEndpoint(TestCase):
    """GET /stats."""

    def setUp(self):
        """Create notifications for the caller and another recipient."""
        self.client = Client(headers={"X-User-ID": "user-1"})
        create_notification(
            recipient_id="user-1",
            type="session",
            read=True,
            created_at=utc(2026, 3, 1, 12),
        )
        create_notification(
            recipient_id="user-1",
            type="community",
            clicked=True,
            push_status=DeliveryStatus.FAILED.value,
            created_at=utc(2026, 3, 5, 12),
        )
        create_notification(recipient_id="user-2", created_at=utc(2026, 3, 2))

    def test_counts_callers_notifications(self):
        """Test totals and breakdowns cover only the caller."""
        response = self.client.get(URL)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["recipient_id"], "user-1")
        self.assertEqual(body["total"], 2)
        self.assertEqual(body["read"], 1)
        self.assertEqual(body["clicked"], 1)
        self.assertEqual(body["by_type"], {"session": 1, "community": 1})
        self.assertEqual(body["by_channel"]["push"]["failed"], 1)
        self.assertEqual(body["by_channel"]["push"]["pending"], 1)

    def test_date_window(self):
        """Test the window bounds are applied."""
        response = self.client.get(
            URL,
            {"start_date": "2026-03-04T00:00:00Z", "end_date": "2026-03-31T00:00:00Z"},
        )

        self.assertEqual(response.json()["total"], 1)

    def test_inverted_window_is_400(self):
        """Test start after end."""
        response = self.client.get(
            URL,
            {"start_date": "2026-03-31T00:00:00Z", "end_date": "2026-03-01T00:00:00Z"},
        )

        self.assertEqual(response.status_code, 400)

    def test_malformed_date_is_400(self):
        """Test unparseable dates."""
        response = self.client.get(URL, {"start_date": "yesterday"})

        self.assertEqual(response.status_code, 400)
