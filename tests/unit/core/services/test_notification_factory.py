"""Tests for NotificationFactory."""

from datetime import timedelta

from django.test import TestCase

from core.enums import DeliveryChannel, DeliveryStatus
from core.exceptions import TemplateNotFoundError
from core.models import Notification
from core.schemas.notification import NotificationCreate
from core.services.notification_factory import NotificationFactory
from tests.factories import create_batch, create_template, fixed_clock, utc


class TestCreateFromTemplate(TestCase):
    """Test suite for template-based creation."""

    def setUp(self):
        """Set up a factory with a frozen clock."""
        self.now = utc(2026, 3, 2, 9, 0)
        self.factory = NotificationFactory(clock=fixed_clock(self.now))
        self.template = create_template(
            template_id="t1",
            title="Hi {{name}}",
            body="Your session with {{mentor}} starts soon",
            default_data={"kind": "session", "cta": "open"},
            expiry_hours=24,
            max_retries=2,
        )

    def test_renders_and_stores(self):
        """Test a rendered notification with every channel pending."""
        notification = self.factory.create_from_template(
            "t1", "u1", placeholders={"name": "Ann", "mentor": "Bob"}
        )

        self.assertEqual(notification.title, "Hi Ann")
        self.assertEqual(notification.body, "Your session with Bob starts soon")
        self.assertEqual(notification.recipient_id, "u1")
        self.assertEqual(notification.type, "session")
        self.assertEqual(notification.expires_at, self.now + timedelta(hours=24))
        self.assertEqual(notification.created_at, notification.updated_at)
        self.assertEqual(notification.max_retries, 2)
        self.assertEqual(notification.metadata["template_id"], "t1")
        for channel in DeliveryChannel:
            self.assertEqual(notification.get_status(channel), DeliveryStatus.PENDING)
        self.assertFalse(notification.read)
        self.assertFalse(notification.clicked)
        self.assertFalse(notification.dismissed)

    def test_round_trip_through_storage(self):
        """Test the stored row equals what was returned."""
        notification = self.factory.create_from_template(
            "t1", "u1", placeholders={"name": "Ann", "mentor": "Bob"}
        )

        stored = Notification.objects.get(pk=notification.notification_id)

        self.assertEqual(stored.title, notification.title)
        self.assertEqual(stored.body, notification.body)
        self.assertEqual(stored.data, notification.data)
        self.assertEqual(stored.delivery_status, notification.delivery_status)

    def test_custom_data_wins_over_defaults(self):
        """Test that custom data overrides template defaults key by key."""
        notification = self.factory.create_from_template(
            "t1", "u1", custom_data={"cta": "join", "room": "7"}
        )

        self.assertEqual(
            notification.data, {"kind": "session", "cta": "join", "room": "7"}
        )

    def test_unknown_placeholders_are_left_verbatim(self):
        """Test rendering with no placeholder values."""
        notification = self.factory.create_from_template("t1", "u1")

        self.assertEqual(notification.title, "Hi {{name}}")

    def test_no_expiry_when_template_has_none(self):
        """Test expiry_hours 0 leaves expires_at empty."""
        create_template(template_id="t2", expiry_hours=0)

        notification = self.factory.create_from_template("t2", "u1")

        self.assertIsNone(notification.expires_at)

    def test_batch_membership_is_recorded(self):
        """Test that campaign notifications reference their batch."""
        batch = create_batch(self.template)

        notification = self.factory.create_from_template("t1", "u1", batch=batch)

        self.assertEqual(notification.batch_id, batch.batch_id)
        self.assertEqual(notification.metadata["campaign_id"], str(batch.batch_id))

    def test_missing_template_raises(self):
        """Test that an unknown template ID raises and stores nothing."""
        with self.assertRaises(TemplateNotFoundError):
            self.factory.create_from_template("missing", "u1")

        self.assertFalse(Notification.objects.exists())


class TestCreate(TestCase):
    """Test suite for direct creation."""

    def setUp(self):
        """Set up a factory with a frozen clock."""
        self.factory = NotificationFactory(clock=fixed_clock(utc(2026, 3, 2)))

    def test_untargeted_channels_are_not_applicable(self):
        """Test that only requested channels start pending."""
        notification = self.factory.create(
            NotificationCreate(
                recipient_id="u1",
                type="system",
                title="Maintenance",
                body="Tonight at 02:00",
                channels=["email", "in_app"],
            )
        )

        self.assertEqual(
            notification.delivery_status,
            {
                "push": "not_applicable",
                "email": "pending",
                "sms": "not_applicable",
                "in_app": "pending",
            },
        )

    def test_all_channels_when_omitted(self):
        """Test that omitting channels targets all four."""
        notification = self.factory.create(
            NotificationCreate(
                recipient_id="u1", type="system", title="Hello", body="World"
            )
        )

        self.assertEqual(len(notification.pending_channels()), 4)

    def test_metadata_carries_source(self):
        """Test source and related entity are stored in metadata."""
        notification = self.factory.create(
            NotificationCreate(
                recipient_id="u1",
                type="message",
                title="New message",
                body="Hi",
                source_user_id="u2",
                related_entity_id="m1",
                related_entity_type="message",
            )
        )

        self.assertEqual(
            notification.metadata,
            {
                "source_user_id": "u2",
                "related_entity_id": "m1",
                "related_entity_type": "message",
            },
        )
