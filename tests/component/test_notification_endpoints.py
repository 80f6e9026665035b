"""Component tests for the notification endpoints."""

import uuid
from unittest.mock import patch

from django.test import Client, TestCase

from core.enums import DeliveryStatus
from core.models import Notification
from tests.factories import create_notification, create_template

BASE_URL = "/api/v1/notification-engine/notifications"


class NotificationEndpointTestCase(TestCase):
    """Client identified as user-1 with the rq queue patched out."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = Client(headers={"X-User-ID": "user-1"})
        patcher = patch("core.services.notification_service.django_rq")
        self.mock_rq = patcher.start()
        self.addCleanup(patcher.stop)

    def queued_ids(self):
        queue = self.mock_rq.get_queue.return_value
        return [c.args[1] for c in queue.enqueue.call_args_list]


class TestCreateNotification(NotificationEndpointTestCase):
    """POST /notifications and /notifications/from-template."""

    def test_create_returns_201_and_queues_dispatch(self):
        """Test explicit content is stored and queued."""
        response = self.client.post(
            BASE_URL,
            {
                "recipientId": "user-2",
                "type": "system",
                "title": "Maintenance",
                "body": "Tonight at 23:00",
                "channels": ["email", "in_app"],
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["recipient_id"], "user-2")
        self.assertEqual(body["delivery_status"]["push"], "not_applicable")
        self.assertEqual(body["delivery_status"]["email"], "pending")
        self.assertEqual(self.queued_ids(), [body["notification_id"]])

    def test_create_rejects_unknown_type(self):
        """Test validation errors use the standard 400 body."""
        response = self.client.post(
            BASE_URL,
            {"recipientId": "user-2", "type": "nope", "title": "t", "body": "b"},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "bad_request")
        self.assertFalse(Notification.objects.exists())

    def test_from_template_renders_placeholders(self):
        """Test template rendering through the API."""
        create_template(template_id="session-reminder")

        response = self.client.post(
            f"{BASE_URL}/from-template",
            {
                "templateId": "session-reminder",
                "recipientId": "user-1",
                "placeholders": {"name": "Ada", "mentor": "Grace"},
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["title"], "Hi Ada")
        self.assertEqual(body["body"], "Your session with Grace starts soon")

    def test_from_unknown_template_is_404(self):
        """Test a missing template."""
        response = self.client.post(
            f"{BASE_URL}/from-template",
            {"templateId": "missing", "recipientId": "user-1"},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 404)
        self.mock_rq.get_queue.return_value.enqueue.assert_not_called()


class TestNotificationAccess(NotificationEndpointTestCase):
    """Reading, updating and deleting the caller's notifications."""

    def setUp(self):
        """Create one notification for the caller and one for someone else."""
        super().setUp()
        self.own = create_notification(recipient_id="user-1")
        self.other = create_notification(recipient_id="user-2")

    def test_list_returns_only_own_notifications(self):
        """Test paging and unread counts."""
        create_notification(recipient_id="user-1", read=True)

        response = self.client.get(BASE_URL, {"limit": 1})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["total_count"], 2)
        self.assertEqual(body["unread_count"], 1)
        self.assertEqual(len(body["notifications"]), 1)

    def test_list_filters_by_read_flag(self):
        """Test the read filter."""
        create_notification(recipient_id="user-1", read=True)

        response = self.client.get(BASE_URL, {"read": "false"})

        ids = [n["notification_id"] for n in response.json()["notifications"]]
        self.assertEqual(ids, [str(self.own.notification_id)])

    def test_missing_identity_is_rejected(self):
        """Test requests without X-User-ID."""
        response = Client().get(BASE_URL)

        self.assertEqual(response.status_code, 403)

    def test_get_own_notification(self):
        """Test retrieving a notification."""
        response = self.client.get(f"{BASE_URL}/{self.own.notification_id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["notification_id"], str(self.own.notification_id)
        )

    def test_other_recipients_notification_is_404(self):
        """Test ownership is enforced without revealing existence."""
        response = self.client.get(f"{BASE_URL}/{self.other.notification_id}")

        self.assertEqual(response.status_code, 404)

    def test_unknown_and_malformed_ids_are_404(self):
        """Test missing notifications."""
        for notification_id in (uuid.uuid4(), "not-a-uuid"):
            with self.subTest(notification_id=notification_id):
                response = self.client.get(f"{BASE_URL}/{notification_id}")
                self.assertEqual(response.status_code, 404)

    def test_patch_updates_fields(self):
        """Test a partial update."""
        response = self.client.patch(
            f"{BASE_URL}/{self.own.notification_id}",
            {"title": "Updated"},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        self.own.refresh_from_db()
        self.assertEqual(self.own.title, "Updated")

    def test_delete(self):
        """Test deletion."""
        response = self.client.delete(f"{BASE_URL}/{self.own.notification_id}")

        self.assertEqual(response.status_code, 204)
        self.assertFalse(
            Notification.objects.filter(
                notification_id=self.own.notification_id
            ).exists()
        )


class TestEngagementEndpoints(NotificationEndpointTestCase):
    """Read, clicked, dismissed and delivery receipts."""

    def setUp(self):
        """Set up test fixtures."""
        super().setUp()
        self.notification = create_notification(recipient_id="user-1")
        self.url = f"{BASE_URL}/{self.notification.notification_id}"

    def test_mark_read_is_idempotent(self):
        """Test read_at is set once."""
        first = self.client.post(f"{self.url}/read").json()
        second = self.client.post(f"{self.url}/read").json()

        self.assertTrue(first["read"])
        self.assertEqual(first["read_at"], second["read_at"])

    def test_mark_clicked_records_action(self):
        """Test the clicked action is stored."""
        response = self.client.post(
            f"{self.url}/clicked",
            {"actionTaken": "open_session"},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["action_taken"], "open_session")

    def test_mark_dismissed(self):
        """Test dismissal."""
        response = self.client.post(f"{self.url}/dismissed")

        self.assertTrue(response.json()["dismissed"])

    def test_mark_all_read(self):
        """Test the bulk read count."""
        create_notification(recipient_id="user-1")

        response = self.client.post(f"{BASE_URL}/read-all")

        self.assertEqual(response.json(), {"updated_count": 2})

    def test_delivery_receipt(self):
        """Test a provider receipt after a successful send."""
        Notification.objects.filter(pk=self.notification.pk).update(
            sms_status=DeliveryStatus.SENT.value
        )

        response = Client().post(f"{self.url}/delivery/sms")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["delivery_status"]["sms"], "delivered")
        self.assertIsNotNone(body["delivered_at"])

    def test_delivery_receipt_unknown_channel(self):
        """Test receipts for channels the engine does not know."""
        response = Client().post(f"{self.url}/delivery/fax")

        self.assertEqual(response.status_code, 400)
