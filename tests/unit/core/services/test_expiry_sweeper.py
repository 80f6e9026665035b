"""Tests for ExpirySweeper."""

from datetime import timedelta
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase

from core.models import Notification
from core.services.expiry_sweeper import ExpirySweeper
from tests.factories import create_notification, fixed_clock, utc

NOW = utc(2026, 5, 1, 6, 0)


class TestExpirySweeper(TestCase):
    """Test suite for ExpirySweeper.sweep."""

    def setUp(self):
        """Set up a sweeper at a fixed instant."""
        self.sweeper = ExpirySweeper(clock=fixed_clock(NOW))

    def test_only_expired_rows_are_deleted(self):
        """Test three expired of five are purged."""
        for hours in (1, 2, 3):
            create_notification(expires_at=NOW - timedelta(hours=hours))
        kept_future = create_notification(expires_at=NOW + timedelta(hours=1))
        kept_forever = create_notification(expires_at=None)

        deleted = self.sweeper.sweep()

        self.assertEqual(deleted, 3)
        self.assertEqual(
            set(Notification.objects.values_list("notification_id", flat=True)),
            {kept_future.notification_id, kept_forever.notification_id},
        )

    def test_limit_bounds_one_pass(self):
        """Test that the oldest expiries go first and the limit holds."""
        oldest = create_notification(expires_at=NOW - timedelta(days=3))
        create_notification(expires_at=NOW - timedelta(days=2))
        newest = create_notification(expires_at=NOW - timedelta(days=1))

        self.assertEqual(self.sweeper.sweep(limit=2), 2)

        remaining = list(Notification.objects.all())
        self.assertEqual(remaining, [newest])
        self.assertFalse(
            Notification.objects.filter(pk=oldest.notification_id).exists()
        )

    def test_nothing_to_do(self):
        """Test an empty sweep."""
        create_notification(expires_at=NOW + timedelta(minutes=1))

        self.assertEqual(self.sweeper.sweep(), 0)
        self.assertEqual(Notification.objects.count(), 1)

    def test_database_error_reports_zero(self):
        """Test that storage failures are logged, not raised."""
        create_notification(expires_at=NOW - timedelta(hours=1))

        with patch(
            "core.services.expiry_sweeper.NotificationRepository.expired_ids",
            side_effect=DatabaseError("connection lost"),
        ):
            self.assertEqual(self.sweeper.sweep(), 0)
