"""Preference resolution: channel gating, quiet hours and frequency.

Rows are read fresh on every call. A missing (recipient, type) row is
materialized from ``DEFAULT_PREFERENCES`` with ``get_or_create`` so two
concurrent first calls end up with the same single row.
"""

from collections.abc import Callable
from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.utils import timezone

import structlog

from core.constants.preferences import (
    DEFAULT_PREFERENCES,
    DEFAULT_QUIET_HOURS_END,
    DEFAULT_QUIET_HOURS_START,
    DEFAULT_TIMEZONE,
)
from core.enums import Frequency, NotificationType
from core.exceptions import ValidationError
from core.models import NotificationPreference
from core.schemas.preference import (
    PreferenceDetail,
    PreferenceUpdate,
    ResolvedPreference,
)

logger = structlog.get_logger(__name__)


def is_within_quiet_hours(local_time: time, start: time, end: time) -> bool:
    """Test a local time of day against a ``[start, end)`` window.

    Windows with ``start > end`` wrap past midnight. ``start == end`` is an
    empty window.

    Example:
        >>> is_within_quiet_hours(time(23, 30), time(22, 0), time(8, 0))
        True
        >>> is_within_quiet_hours(time(8, 0), time(22, 0), time(8, 0))
        False
    """
    if start == end:
        return False
    if start < end:
        return start <= local_time < end
    return local_time >= start or local_time < end


def next_window_boundary(frequency: Frequency, now_local: datetime) -> datetime | None:
    """Next hourly, daily or weekly boundary after ``now_local``.

    Weekly windows open on Monday at midnight local time. Returns None for
    ``immediate`` and ``never``.
    """
    top_of_hour = now_local.replace(minute=0, second=0, microsecond=0)
    midnight = top_of_hour.replace(hour=0)
    if frequency == Frequency.HOURLY:
        return top_of_hour + timedelta(hours=1)
    if frequency == Frequency.DAILY:
        return midnight + timedelta(days=1)
    if frequency == Frequency.WEEKLY:
        return midnight + timedelta(days=7 - midnight.weekday())
    return None


class PreferenceResolver:
    """Resolves which channels a recipient accepts right now.

    Args:
        clock: Callable returning the current aware datetime.
    """

    def __init__(self, clock: Callable[[], datetime] = timezone.now) -> None:
        """Initialize resolver with an injectable clock."""
        self.clock = clock

    def get_or_create_default(
        self, recipient_id: str, notification_type: str
    ) -> NotificationPreference:
        """Return the whole-type row, creating it from defaults if absent."""
        defaults = DEFAULT_PREFERENCES.get(
            notification_type,
            DEFAULT_PREFERENCES[NotificationType.SYSTEM.value],
        )
        now = self.clock()
        preference, created = NotificationPreference.objects.get_or_create(
            recipient_id=recipient_id,
            type=notification_type,
            subtype="",
            defaults={
                **defaults,
                "quiet_hours_start": DEFAULT_QUIET_HOURS_START,
                "quiet_hours_end": DEFAULT_QUIET_HOURS_END,
                "timezone": DEFAULT_TIMEZONE,
                "created_at": now,
                "updated_at": now,
            },
        )

        if created:
            logger.info(
                "default_preference_created",
                recipient_id=recipient_id,
                type=notification_type,
            )
        return preference

    def _find(
        self, recipient_id: str, notification_type: str, subtype: str | None
    ) -> NotificationPreference:
        if subtype:
            scoped = NotificationPreference.objects.filter(
                recipient_id=recipient_id,
                type=notification_type,
                subtype=subtype,
            ).first()
            if scoped is not None:
                return scoped
        return self.get_or_create_default(recipient_id, notification_type)

    def resolve(
        self,
        recipient_id: str,
        notification_type: str,
        subtype: str | None = None,
    ) -> ResolvedPreference:
        """Compute the gating decision for one recipient and type.

        Args:
            recipient_id: Recipient user ID
            notification_type: Notification type value
            subtype: Optional subtype; a subtype-scoped row wins over the
                whole-type row

        Returns:
            Enabled channels, whether quiet hours hold delivery now, the
            frequency and the instants at which held channels become due.
        """
        preference = self._find(recipient_id, notification_type, subtype)
        frequency = Frequency(preference.frequency)
        tz = self._zone(preference)
        now_local = self.clock().astimezone(tz)

        enabled = frozenset(channel.value for channel in preference.enabled_channels)
        if frequency == Frequency.NEVER:
            enabled = frozenset()

        quiet_end_at = None
        if (
            preference.quiet_hours_enabled
            and preference.quiet_hours_start is not None
            and preference.quiet_hours_end is not None
        ):
            quiet_end_at = self._quiet_window_end(
                now_local, preference.quiet_hours_start, preference.quiet_hours_end
            )

        next_window = next_window_boundary(frequency, now_local)
        return ResolvedPreference(
            enabled_channels=enabled,
            quiet_now=quiet_end_at is not None,
            frequency=frequency.value,
            quiet_hours_end_at=quiet_end_at.astimezone(UTC) if quiet_end_at else None,
            next_window_at=next_window.astimezone(UTC) if next_window else None,
            timezone=str(tz),
            preference=PreferenceDetail.model_validate(preference),
        )

    @staticmethod
    def _quiet_window_end(
        now_local: datetime, start: time, end: time
    ) -> datetime | None:
        local_time = now_local.time().replace(tzinfo=None)
        if not is_within_quiet_hours(local_time, start, end):
            return None
        end_date = now_local.date()
        if start > end and local_time >= start:
            end_date += timedelta(days=1)
        return datetime.combine(end_date, end, tzinfo=now_local.tzinfo)

    @staticmethod
    def _zone(preference: NotificationPreference) -> ZoneInfo:
        try:
            return ZoneInfo(preference.timezone or DEFAULT_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                "invalid_preference_timezone",
                recipient_id=preference.recipient_id,
                timezone=preference.timezone,
            )
            return ZoneInfo(DEFAULT_TIMEZONE)

    def update(
        self,
        recipient_id: str,
        notification_type: str,
        changes: PreferenceUpdate,
    ) -> NotificationPreference:
        """Upsert a preference row with the provided fields.

        Raises:
            ValidationError: If the type is unknown.
        """
        if notification_type not in DEFAULT_PREFERENCES:
            raise ValidationError(f"Unknown notification type: {notification_type}")

        if changes.subtype:
            preference, _ = NotificationPreference.objects.get_or_create(
                recipient_id=recipient_id,
                type=notification_type,
                subtype=changes.subtype,
                defaults=self._row_defaults(recipient_id, notification_type),
            )
        else:
            preference = self.get_or_create_default(recipient_id, notification_type)

        fields = changes.changes()
        for name, value in fields.items():
            setattr(preference, name, value)
        preference.updated_at = self.clock()
        preference.save(update_fields=[*fields, "updated_at"])

        logger.info(
            "preference_updated",
            recipient_id=recipient_id,
            type=notification_type,
            subtype=changes.subtype,
            fields=sorted(fields),
        )
        return preference

    def _row_defaults(self, recipient_id: str, notification_type: str) -> dict:
        base = self.get_or_create_default(recipient_id, notification_type)
        now = self.clock()
        return {
            "push_enabled": base.push_enabled,
            "email_enabled": base.email_enabled,
            "sms_enabled": base.sms_enabled,
            "in_app_enabled": base.in_app_enabled,
            "frequency": base.frequency,
            "quiet_hours_enabled": base.quiet_hours_enabled,
            "quiet_hours_start": base.quiet_hours_start,
            "quiet_hours_end": base.quiet_hours_end,
            "timezone": base.timezone,
            "created_at": now,
            "updated_at": now,
        }

    def list_for_recipient(self, recipient_id: str) -> list[NotificationPreference]:
        """All rows of a recipient, materializing defaults for every type."""
        for notification_type in DEFAULT_PREFERENCES:
            self.get_or_create_default(recipient_id, notification_type)
        return list(
            NotificationPreference.objects.filter(recipient_id=recipient_id).order_by(
                "type", "subtype"
            )
        )


preference_resolver = PreferenceResolver()
