"""Component tests for the campaign batch endpoints."""

from datetime import timedelta
from unittest.mock import patch

from django.test import Client, TestCase
from django.utils import timezone

from core.enums import BatchStatus
from core.models import NotificationBatch
from tests.factories import create_batch, create_template

BASE_URL = "/api/v1/notification-engine/batches"


class TestBatchEndpoints(TestCase):
    """Batch creation, start and cancel."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = Client()
        self.template = create_template(template_id="launch")
        patcher = patch("core.services.campaign_engine.django_rq")
        self.mock_rq = patcher.start()
        self.addCleanup(patcher.stop)

    def test_create_draft_batch(self):
        """Test a batch without a schedule starts as a draft."""
        response = self.client.post(
            BASE_URL,
            {
                "name": "Launch",
                "templateId": "launch",
                "targetUsers": ["u1", "u2"],
                "batchSize": 50,
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["status"], "draft")
        self.assertEqual(body["batch_size"], 50)
        self.assertEqual(body["progress_total"], 0)

    def test_create_scheduled_batch(self):
        """Test a future schedule registers an rq-scheduler job."""
        when = timezone.now() + timedelta(days=1)

        response = self.client.post(
            BASE_URL,
            {
                "name": "Launch",
                "templateId": "launch",
                "targetCriteria": {"roles": ["mentor"]},
                "scheduledFor": when.isoformat(),
            },
            content_type="application/json",
        )

        self.assertEqual(response.json()["status"], "scheduled")
        self.mock_rq.get_scheduler.return_value.enqueue_at.assert_called_once()

    def test_create_requires_audience(self):
        """Test an empty audience is rejected up front."""
        response = self.client.post(
            BASE_URL,
            {"name": "Launch", "templateId": "launch"},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)

    def test_create_rejects_unknown_criteria(self):
        """Test a typo in the criteria does not widen the audience."""
        response = self.client.post(
            BASE_URL,
            {
                "name": "Launch",
                "templateId": "launch",
                "targetCriteria": {"role": ["mentor"]},
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)

    def test_create_with_unknown_template_is_404(self):
        """Test the template must exist."""
        response = self.client.post(
            BASE_URL,
            {"name": "Launch", "templateId": "missing", "targetUsers": ["u1"]},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 404)

    def test_get_batch(self):
        """Test batch retrieval and 404."""
        batch = create_batch(self.template, target_users=["u1"])

        response = self.client.get(f"{BASE_URL}/{batch.batch_id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["target_users"], ["u1"])
        self.assertEqual(self.client.get(f"{BASE_URL}/nope").status_code, 404)

    def test_start_enqueues_run(self):
        """Test starting a draft batch."""
        batch = create_batch(self.template, target_users=["u1"])

        response = self.client.post(f"{BASE_URL}/{batch.batch_id}/start")

        self.assertEqual(response.status_code, 202)
        self.mock_rq.get_queue.return_value.enqueue.assert_called_once_with(
            "core.jobs.campaign_jobs.run_campaign_job", str(batch.batch_id)
        )

    def test_start_completed_batch_is_conflict(self):
        """Test finished batches cannot be restarted."""
        batch = create_batch(
            self.template, target_users=["u1"], status=BatchStatus.COMPLETED.value
        )

        response = self.client.post(f"{BASE_URL}/{batch.batch_id}/start")

        self.assertEqual(response.status_code, 409)

    def test_cancel(self):
        """Test cancelling a draft and then cancelling again."""
        batch = create_batch(self.template, target_users=["u1"])

        first = self.client.post(f"{BASE_URL}/{batch.batch_id}/cancel")
        second = self.client.post(f"{BASE_URL}/{batch.batch_id}/cancel")

        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["status"], "cancelled")
        self.assertEqual(second.status_code, 409)
        batch.refresh_from_db()
        self.assertIsNotNone(batch.completed_at)
        self.assertEqual(NotificationBatch.objects.count(), 1)
