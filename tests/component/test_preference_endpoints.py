"""Component tests for the preference endpoints."""

from django.test import Client, TestCase

from core.enums import NotificationType
from core.models import NotificationPreference

BASE_URL = "/api/v1/notification-engine/preferences"


class TestPreferenceEndpoints(TestCase):
    """GET /preferences and PATCH /preferences/<type>."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = Client(headers={"X-User-ID": "user-1"})

    def test_list_materializes_defaults(self):
        """Test one row per notification type is returned."""
        response = self.client.get(BASE_URL)

        self.assertEqual(response.status_code, 200)
        types = {p["type"] for p in response.json()["preferences"]}
        self.assertEqual(types, {t.value for t in NotificationType})
        self.assertEqual(
            NotificationPreference.objects.filter(recipient_id="user-1").count(),
            len(NotificationType),
        )

    def test_patch_updates_only_given_fields(self):
        """Test a partial update with quiet hours."""
        response = self.client.patch(
            f"{BASE_URL}/community",
            {
                "smsEnabled": False,
                "quietHoursEnabled": True,
                "quietHoursStart": "22:00",
                "quietHoursEnd": "07:00",
                "timezone": "Europe/Berlin",
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["sms_enabled"])
        self.assertTrue(body["push_enabled"])
        self.assertEqual(body["quiet_hours_start"], "22:00:00")
        self.assertEqual(body["timezone"], "Europe/Berlin")

    def test_patch_rejects_unknown_timezone(self):
        """Test timezone names are validated."""
        response = self.client.patch(
            f"{BASE_URL}/community",
            {"timezone": "Mars/Olympus"},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)

    def test_patch_rejects_unknown_type(self):
        """Test the notification type in the path is validated."""
        response = self.client.patch(
            f"{BASE_URL}/unknown",
            {"pushEnabled": False},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)

    def test_requires_identity(self):
        """Test anonymous callers are rejected."""
        self.assertEqual(Client().get(BASE_URL).status_code, 403)
