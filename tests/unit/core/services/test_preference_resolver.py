"""Tests for preference resolution, quiet hours and frequency windows."""

from datetime import datetime, time

from django.test import SimpleTestCase, TestCase

from core.enums import Frequency
from core.exceptions import ValidationError
from core.models import NotificationPreference
from core.schemas.preference import PreferenceUpdate
from core.services.preference_resolver import (
    PreferenceResolver,
    is_within_quiet_hours,
    next_window_boundary,
)
from tests.factories import fixed_clock, utc


class TestQuietHoursWindow(SimpleTestCase):
    """Test suite for is_within_quiet_hours."""

    def test_window_wrapping_midnight(self):
        """Test a 22:00-08:00 window on both sides of midnight."""
        start, end = time(22, 0), time(8, 0)

        self.assertTrue(is_within_quiet_hours(time(23, 30), start, end))
        self.assertTrue(is_within_quiet_hours(time(3, 0), start, end))
        self.assertTrue(is_within_quiet_hours(time(22, 0), start, end))
        self.assertFalse(is_within_quiet_hours(time(8, 0), start, end))
        self.assertFalse(is_within_quiet_hours(time(12, 0), start, end))

    def test_same_day_window(self):
        """Test a window that does not wrap."""
        start, end = time(13, 0), time(14, 0)

        self.assertTrue(is_within_quiet_hours(time(13, 30), start, end))
        self.assertFalse(is_within_quiet_hours(time(14, 0), start, end))

    def test_equal_bounds_is_empty(self):
        """Test that start == end never matches."""
        self.assertFalse(is_within_quiet_hours(time(9, 0), time(9, 0), time(9, 0)))


class TestNextWindowBoundary(SimpleTestCase):
    """Test suite for next_window_boundary."""

    def setUp(self):
        """Wednesday 2026-01-14 10:15 UTC."""
        self.now = utc(2026, 1, 14, 10, 15)

    def test_hourly(self):
        """Test the next top of the hour."""
        self.assertEqual(
            next_window_boundary(Frequency.HOURLY, self.now), utc(2026, 1, 14, 11)
        )

    def test_daily(self):
        """Test the next midnight."""
        self.assertEqual(
            next_window_boundary(Frequency.DAILY, self.now), utc(2026, 1, 15)
        )

    def test_weekly(self):
        """Test the next Monday midnight."""
        self.assertEqual(
            next_window_boundary(Frequency.WEEKLY, self.now), utc(2026, 1, 19)
        )

    def test_immediate_and_never_have_no_window(self):
        """Test frequencies without a window."""
        self.assertIsNone(next_window_boundary(Frequency.IMMEDIATE, self.now))
        self.assertIsNone(next_window_boundary(Frequency.NEVER, self.now))


class TestPreferenceResolver(TestCase):
    """Test suite for PreferenceResolver."""

    def setUp(self):
        """Set up a resolver at midday UTC."""
        self.resolver = PreferenceResolver(clock=fixed_clock(utc(2026, 1, 14, 12)))

    def test_missing_row_is_materialized_from_defaults(self):
        """Test the first resolve for (u1, session) creates the default row."""
        resolved = self.resolver.resolve("u1", "session")

        self.assertEqual(
            resolved.enabled_channels, frozenset({"push", "email", "sms", "in_app"})
        )
        self.assertEqual(resolved.frequency, "immediate")
        self.assertFalse(resolved.preference.quiet_hours_enabled)
        self.assertFalse(resolved.quiet_now)
        rows = NotificationPreference.objects.filter(recipient_id="u1", type="session")
        self.assertEqual(rows.count(), 1)

    def test_second_resolve_reuses_row(self):
        """Test that resolving again does not create another row."""
        self.resolver.resolve("u1", "session")
        first = NotificationPreference.objects.get(recipient_id="u1", type="session")

        self.resolver.resolve("u1", "session")

        rows = NotificationPreference.objects.filter(recipient_id="u1", type="session")
        self.assertEqual(rows.count(), 1)
        self.assertEqual(rows.get().pk, first.pk)

    def test_quiet_hours_active_at_2330(self):
        """Test 23:30 local inside a 22:00-08:00 window."""
        resolver = PreferenceResolver(clock=fixed_clock(utc(2026, 1, 14, 23, 30)))

        resolved = resolver.resolve("u1", "message")

        self.assertTrue(resolved.quiet_now)
        self.assertEqual(resolved.quiet_hours_end_at, utc(2026, 1, 15, 8))

    def test_quiet_hours_use_recipient_timezone(self):
        """Test that the window is evaluated in the recipient's timezone."""
        resolver = PreferenceResolver(clock=fixed_clock(utc(2026, 1, 15, 4, 30)))
        resolver.get_or_create_default("u1", "message")
        NotificationPreference.objects.filter(recipient_id="u1").update(
            timezone="America/New_York"
        )

        resolved = resolver.resolve("u1", "message")

        # 04:30 UTC is 23:30 in New York; the window ends at 08:00 EST
        self.assertTrue(resolved.quiet_now)
        self.assertEqual(resolved.quiet_hours_end_at, utc(2026, 1, 15, 13))
        self.assertEqual(resolved.timezone, "America/New_York")

    def test_outside_quiet_hours(self):
        """Test midday is not quiet."""
        resolved = self.resolver.resolve("u1", "message")

        self.assertFalse(resolved.quiet_now)
        self.assertIsNone(resolved.quiet_hours_end_at)

    def test_frequency_window_for_hourly_type(self):
        """Test that an hourly type reports the next window."""
        resolved = self.resolver.resolve("u1", "community")

        self.assertEqual(resolved.frequency, "hourly")
        self.assertEqual(resolved.next_window_at, utc(2026, 1, 14, 13))

    def test_never_frequency_disables_every_channel(self):
        """Test that frequency never yields no enabled channels."""
        self.resolver.update(
            "u1", "message", PreferenceUpdate(frequency=Frequency.NEVER)
        )

        resolved = self.resolver.resolve("u1", "message")

        self.assertEqual(resolved.enabled_channels, frozenset())

    def test_invalid_stored_timezone_falls_back_to_utc(self):
        """Test that a bad timezone does not break resolution."""
        self.resolver.get_or_create_default("u1", "message")
        NotificationPreference.objects.filter(recipient_id="u1").update(
            timezone="Mars/Olympus"
        )

        resolved = self.resolver.resolve("u1", "message")

        self.assertEqual(resolved.timezone, "UTC")

    def test_update_changes_only_given_fields(self):
        """Test a partial update keeps the other defaults."""
        preference = self.resolver.update(
            "u1", "session", PreferenceUpdate(sms_enabled=False)
        )

        preference.refresh_from_db()
        self.assertFalse(preference.sms_enabled)
        self.assertTrue(preference.push_enabled)
        self.assertEqual(preference.frequency, "immediate")

    def test_update_unknown_type_raises(self):
        """Test that an unknown type is rejected."""
        with self.assertRaises(ValidationError):
            self.resolver.update("u1", "unknown", PreferenceUpdate())

    def test_subtype_row_wins_over_type_row(self):
        """Test that a subtype-scoped row is used for that subtype only."""
        self.resolver.update(
            "u1",
            "session",
            PreferenceUpdate(subtype="session_reminder", email_enabled=False),
        )

        scoped = self.resolver.resolve("u1", "session", "session_reminder")
        whole = self.resolver.resolve("u1", "session")

        self.assertNotIn("email", scoped.enabled_channels)
        self.assertIn("email", whole.enabled_channels)
        self.assertTrue(scoped.preference.sms_enabled)

    def test_list_for_recipient_materializes_every_type(self):
        """Test listing creates one row per notification type."""
        preferences = self.resolver.list_for_recipient("u2")

        self.assertEqual(len(preferences), 7)
        self.assertEqual(
            {p.type for p in preferences},
            {
                "message",
                "session",
                "prototype",
                "community",
                "system",
                "marketing",
                "reminder",
            },
        )

    def test_rows_are_read_fresh_on_every_call(self):
        """Test that a change between calls is seen immediately."""
        self.resolver.resolve("u1", "session")
        NotificationPreference.objects.filter(recipient_id="u1").update(
            push_enabled=False
        )

        resolved = self.resolver.resolve("u1", "session")

        self.assertNotIn("push", resolved.enabled_channels)


class TestResolvedDatetimes(SimpleTestCase):
    """Sanity checks on the UTC helper used above."""

    def test_utc_helper_is_aware(self):
        """Test that utc() builds aware datetimes."""
        self.assertIsNotNone(utc(2026, 1, 1).tzinfo)
        self.assertIsInstance(utc(2026, 1, 1), datetime)
