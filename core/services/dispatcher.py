"""Delivery dispatcher: per-channel sending, retries and delivery receipts.

One dispatch pass looks at every channel still ``pending``:

- channels the recipient disabled become ``not_applicable``;
- a future ``scheduled_for``, a non-immediate frequency or active quiet
  hours hold channels back by setting ``deferred_until``;
- every other channel is submitted to its adapter. Accepted submissions
  move to ``sent``. Rejections stay ``pending`` and are retried by an rq
  scheduler job until ``max_retries`` rounds are used up, then move to
  ``failed``.

Status columns only move through compare-and-set updates, so a retry job, a
redispatch and a delivery receipt racing on the same notification never
move a channel backwards.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from django.utils import timezone

import django_rq
import structlog

from core.config.engine import engine_setting
from core.constants import QUIET_HOURS_GATED_CHANNELS
from core.enums import DeferralReason, DeliveryChannel, DeliveryStatus
from core.exceptions import NotificationNotFoundError, ProviderError
from core.models import Notification, User
from core.repositories.batch_repository import NotificationBatchRepository
from core.repositories.notification_repository import NotificationRepository
from core.repositories.user_repository import UserRepository
from core.schemas.notification import DispatchOutcome
from core.schemas.preference import ResolvedPreference
from core.services.channels import ChannelAdapter, build_adapters
from core.services.preference_resolver import PreferenceResolver

logger = structlog.get_logger(__name__)

RETRY_JOB = "core.jobs.delivery_jobs.retry_delivery_job"

ACCEPTED_STATUSES = (DeliveryStatus.SENT, DeliveryStatus.DELIVERED)

OUTCOME_SENT = "sent"
OUTCOME_FAILED = "failed"
OUTCOME_PENDING = "pending"


def overall_outcome(notification: Notification) -> str:
    """Summarize channel statuses as ``sent``, ``failed`` or ``pending``."""
    statuses = [notification.get_status(channel) for channel in DeliveryChannel]
    if any(status in ACCEPTED_STATUSES for status in statuses):
        return OUTCOME_SENT
    if DeliveryStatus.PENDING in statuses:
        return OUTCOME_PENDING
    return OUTCOME_FAILED


class DeliveryDispatcher:
    """Delivers notifications over their enabled channels.

    Args:
        adapters: Adapter per channel; built from settings when omitted.
        resolver: Preference resolver used for channel gating.
        clock: Callable returning the current aware datetime.
    """

    def __init__(
        self,
        adapters: dict[DeliveryChannel, ChannelAdapter] | None = None,
        resolver: PreferenceResolver | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        """Initialize dispatcher."""
        self._adapters = adapters
        self.clock = clock
        self.resolver = resolver or PreferenceResolver(clock=clock)

    @property
    def adapters(self) -> dict[DeliveryChannel, ChannelAdapter]:
        """Channel adapters, instantiated on first use."""
        if self._adapters is None:
            self._adapters = build_adapters()
        return self._adapters

    def dispatch(
        self,
        notification: Notification,
        respect_quiet_hours: bool = True,
        respect_preferences: bool = True,
    ) -> DispatchOutcome:
        """Run one dispatch pass over a notification's pending channels.

        Provider failures never propagate: they are recorded on the channel
        and retried per the notification's retry settings.

        Args:
            notification: Notification to deliver
            respect_quiet_hours: Hold gated channels during quiet hours
            respect_preferences: Apply channel toggles and frequency; when
                False every pending channel is eligible, and only the quiet
                hours window of the preference row is consulted

        Returns:
            Channel statuses after the pass and the overall outcome.
        """
        notification_id = notification.notification_id
        notification = NotificationRepository.get(notification_id)
        now = self.clock()
        self._remember_gating(notification, respect_quiet_hours, respect_preferences)

        if notification.deferred_until and notification.deferred_until > now:
            logger.debug(
                "dispatch_skipped_on_hold",
                notification_id=str(notification_id),
                deferred_until=notification.deferred_until.isoformat(),
            )
            return self._outcome(notification, accepted=[])

        # Channels waiting for a retry round are left to the retry job
        candidates = [
            channel
            for channel in notification.pending_channels()
            if channel.value not in (notification.retry_channels or [])
        ]
        if not candidates:
            return self._settle(notification, accepted=[])

        resolved = None
        if respect_preferences or respect_quiet_hours:
            resolved = self.resolver.resolve(
                notification.recipient_id,
                notification.type,
                notification.subtype or None,
            )
        if respect_preferences:
            enabled = [
                channel
                for channel in candidates
                if channel.value in resolved.enabled_channels
            ]
            for channel in candidates:
                if channel not in enabled:
                    NotificationRepository.transition_channel(
                        notification_id,
                        channel,
                        (DeliveryStatus.PENDING,),
                        DeliveryStatus.NOT_APPLICABLE,
                        now,
                    )
        else:
            enabled = candidates

        held, deferred_until, reason = self._deferral(
            notification,
            enabled,
            resolved,
            respect_quiet_hours,
            respect_preferences,
            now,
        )
        if held:
            self._hold(notification, deferred_until, reason, now)
        elif notification.deferred_until:
            NotificationRepository.update_fields(
                notification_id, deferred_until=None, deferred_reason=None
            )

        to_send = [channel for channel in enabled if channel not in held]
        accepted = self._attempt(notification, to_send)

        notification.refresh_from_db()
        logger.info(
            "notification_dispatched",
            notification_id=str(notification_id),
            recipient_id=notification.recipient_id,
            statuses=notification.delivery_status,
            held=[channel.value for channel in held],
        )
        return self._settle(notification, accepted)

    def _remember_gating(
        self,
        notification: Notification,
        respect_quiet_hours: bool,
        respect_preferences: bool,
    ) -> None:
        metadata = dict(notification.metadata or {})
        if (
            metadata.get("respect_quiet_hours") == respect_quiet_hours
            and metadata.get("respect_preferences") == respect_preferences
        ):
            return
        metadata["respect_quiet_hours"] = respect_quiet_hours
        metadata["respect_preferences"] = respect_preferences
        notification.metadata = metadata
        NotificationRepository.update_fields(
            notification.notification_id, metadata=metadata
        )

    def _deferral(
        self,
        notification: Notification,
        enabled: list[DeliveryChannel],
        resolved: ResolvedPreference | None,
        respect_quiet_hours: bool,
        respect_preferences: bool,
        now: datetime,
    ) -> tuple[list[DeliveryChannel], datetime | None, DeferralReason | None]:
        """Decide which enabled channels wait, until when, and why."""
        if not enabled:
            return [], None, None

        if notification.scheduled_for and notification.scheduled_for > now:
            return list(enabled), notification.scheduled_for, DeferralReason.SCHEDULED

        if (
            respect_preferences
            and resolved is not None
            and resolved.next_window_at is not None
            and not notification.metadata.get("frequency_released")
        ):
            return list(enabled), resolved.next_window_at, DeferralReason.FREQUENCY

        if (
            respect_quiet_hours
            and resolved is not None
            and resolved.quiet_now
            and notification.scheduled_for is None
        ):
            gated = [
                channel for channel in enabled if channel in QUIET_HOURS_GATED_CHANNELS
            ]
            if gated:
                return gated, resolved.quiet_hours_end_at, DeferralReason.QUIET_HOURS

        return [], None, None

    def _hold(
        self,
        notification: Notification,
        deferred_until: datetime | None,
        reason: DeferralReason | None,
        now: datetime,
    ) -> None:
        fields: dict[str, Any] = {
            "deferred_until": deferred_until,
            "deferred_reason": reason.value if reason else None,
            "updated_at": now,
        }
        if reason == DeferralReason.FREQUENCY:
            # The next pass after the window opens must not defer again
            notification.metadata = {
                **notification.metadata,
                "frequency_released": True,
            }
            fields["metadata"] = notification.metadata
        NotificationRepository.update_fields(notification.notification_id, **fields)
        logger.info(
            "notification_deferred",
            notification_id=str(notification.notification_id),
            reason=reason.value if reason else None,
            deferred_until=deferred_until.isoformat() if deferred_until else None,
        )

    def _attempt(
        self,
        notification: Notification,
        channels: list[DeliveryChannel],
    ) -> list[DeliveryChannel]:
        """Submit to each channel's adapter and record the results.

        Returns:
            Channels whose submission was accepted.
        """
        if not channels:
            return []

        notification_id = notification.notification_id
        user = UserRepository.get_user(notification.recipient_id)
        payload = {
            **(notification.data or {}),
            "notification_id": str(notification_id),
            "type": notification.type,
        }
        accepted: list[DeliveryChannel] = []
        retry: list[DeliveryChannel] = []
        errors = dict(notification.delivery_errors or {})
        addresses: dict[str, Any] = {}

        for channel in channels:
            address = self._address(channel, notification, user, addresses)
            now = self.clock()
            try:
                ok = self.adapters[channel].send(
                    address, notification.title, notification.body, payload
                )
                error = None if ok else "Rejected by provider"
                retryable = True
            except ProviderError as e:
                ok, error, retryable = False, str(e), e.retryable
            except Exception as e:
                logger.exception(
                    "channel_adapter_error",
                    notification_id=str(notification_id),
                    channel=channel.value,
                )
                ok, error, retryable = False, str(e), True

            if ok:
                NotificationRepository.transition_channel(
                    notification_id,
                    channel,
                    (DeliveryStatus.PENDING,),
                    DeliveryStatus.SENT,
                    now,
                )
                errors.pop(channel.value, None)
                accepted.append(channel)
                continue

            errors[channel.value] = error
            if retryable and notification.retry_count < notification.max_retries:
                retry.append(channel)
                logger.warning(
                    "channel_send_failed_retry_pending",
                    notification_id=str(notification_id),
                    channel=channel.value,
                    retry_count=notification.retry_count,
                    error=error,
                )
            else:
                NotificationRepository.transition_channel(
                    notification_id,
                    channel,
                    (DeliveryStatus.PENDING,),
                    DeliveryStatus.FAILED,
                    now,
                )
                logger.error(
                    "channel_send_failed_permanently",
                    notification_id=str(notification_id),
                    channel=channel.value,
                    retry_count=notification.retry_count,
                    error=error,
                )

        metadata = {**(notification.metadata or {}), **addresses}
        NotificationRepository.merge_retry_channels(
            notification_id,
            settled=[channel for channel in channels if channel not in retry],
            awaiting=retry,
            delivery_errors=errors,
            metadata=metadata,
        )
        if retry:
            self._schedule_retry(notification)
        return accepted

    @staticmethod
    def _address(
        channel: DeliveryChannel,
        notification: Notification,
        user: User | None,
        used: dict[str, Any],
    ) -> Any:
        """Destination for one channel, recorded into ``used``."""
        if channel == DeliveryChannel.IN_APP:
            return notification.recipient_id
        if user is None:
            return None
        if channel == DeliveryChannel.EMAIL:
            used["email_address"] = user.email
            return user.email or None
        if channel == DeliveryChannel.SMS:
            used["phone_number"] = user.phone_number
            return user.phone_number or None
        used["device_tokens"] = list(user.device_tokens or [])
        return used["device_tokens"] or None

    def _schedule_retry(self, notification: Notification) -> None:
        delay = timedelta(minutes=notification.retry_delay_minutes)
        scheduler = django_rq.get_scheduler(engine_setting("QUEUE_NAME"))
        scheduler.enqueue_in(
            delay,
            RETRY_JOB,
            str(notification.notification_id),
            notification.retry_count,
        )
        logger.info(
            "retry_scheduled",
            notification_id=str(notification.notification_id),
            retry_count=notification.retry_count,
            delay_minutes=notification.retry_delay_minutes,
        )

    def retry(
        self, notification_id: UUID | str, expected_count: int | None = None
    ) -> DispatchOutcome | None:
        """Run one retry round for the channels awaiting a retry.

        The round is claimed by advancing ``retry_count`` with a
        compare-and-set, so a duplicated job runs at most once.

        Args:
            notification_id: Notification to retry
            expected_count: ``retry_count`` at the time the round was
                scheduled; stale jobs are ignored

        Returns:
            The outcome after the round, or None if there was nothing to do.
        """
        try:
            notification = NotificationRepository.get(notification_id)
        except NotificationNotFoundError:
            logger.info(
                "retry_skipped_notification_gone",
                notification_id=str(notification_id),
            )
            return None

        if expected_count is not None and notification.retry_count != expected_count:
            logger.info(
                "retry_skipped_stale_round",
                notification_id=str(notification_id),
                retry_count=notification.retry_count,
                expected_count=expected_count,
            )
            return None

        channels = [
            DeliveryChannel(value)
            for value in notification.retry_channels
            if notification.get_status(DeliveryChannel(value)) == DeliveryStatus.PENDING
        ]
        if not channels:
            return None

        now = self.clock()
        if not NotificationRepository.claim_retry_round(
            notification_id, notification.retry_count, now
        ):
            return None
        notification.refresh_from_db()

        logger.info(
            "retry_round_started",
            notification_id=str(notification_id),
            retry_count=notification.retry_count,
            channels=[channel.value for channel in channels],
        )
        accepted = self._attempt(notification, channels)
        notification.refresh_from_db()
        return self._settle(notification, accepted)

    def acknowledge_delivery(
        self, notification_id: UUID | str, channel: DeliveryChannel | str
    ) -> Notification:
        """Apply a provider delivery receipt.

        Moves the channel from ``pending`` or ``sent`` to ``delivered``.
        Receipts may arrive in any order and more than once; repeats are
        no-ops. The first delivered channel sets ``delivered_at`` and counts
        the notification as delivered on its campaign batch.

        Raises:
            NotificationNotFoundError: If the notification does not exist.
        """
        channel = DeliveryChannel(channel)
        notification = NotificationRepository.get(notification_id)
        now = self.clock()

        moved = NotificationRepository.transition_channel(
            notification.notification_id,
            channel,
            (DeliveryStatus.PENDING, DeliveryStatus.SENT),
            DeliveryStatus.DELIVERED,
            now,
        )
        notification.refresh_from_db()
        if not moved:
            return notification

        logger.info(
            "delivery_acknowledged",
            notification_id=str(notification.notification_id),
            channel=channel.value,
        )
        if NotificationRepository.set_delivered_at(notification.notification_id, now):
            if notification.batch_id:
                self._record_campaign_outcome(notification)
                NotificationBatchRepository.increment_progress(
                    notification.batch_id, delivered=1
                )
            notification.refresh_from_db()
        return notification

    def _settle(
        self, notification: Notification, accepted: list[DeliveryChannel]
    ) -> DispatchOutcome:
        if notification.batch_id:
            self._record_campaign_outcome(notification)
        return self._outcome(notification, accepted)

    @staticmethod
    def _record_campaign_outcome(notification: Notification) -> None:
        """Count the notification once as sent or failed on its batch."""
        outcome = overall_outcome(notification)
        if outcome == OUTCOME_PENDING:
            return
        if not NotificationRepository.claim_outcome(notification.notification_id):
            return
        NotificationBatchRepository.increment_progress(
            notification.batch_id,
            **{outcome: 1, "pending": -1},
        )

    @staticmethod
    def _outcome(
        notification: Notification, accepted: list[DeliveryChannel]
    ) -> DispatchOutcome:
        return DispatchOutcome(
            notification_id=notification.notification_id,
            statuses=notification.delivery_status,
            accepted=[channel.value for channel in accepted],
            outcome=overall_outcome(notification),
            deferred_until=notification.deferred_until,
            deferred_reason=notification.deferred_reason,
        )

    def redispatch_due(self, limit: int | None = None) -> int:
        """Re-run dispatch for held notifications whose hold has expired.

        Each notification is dispatched with the gating flags it was first
        dispatched with.

        Returns:
            Number of notifications dispatched.
        """
        limit = limit or engine_setting("REDISPATCH_LIMIT")
        now = self.clock()
        due = NotificationRepository.due_for_redispatch(now, limit)
        dispatched = 0
        for notification in due:
            NotificationRepository.update_fields(
                notification.notification_id, deferred_until=None
            )
            notification.deferred_until = None
            try:
                self.dispatch(
                    notification,
                    respect_quiet_hours=notification.metadata.get(
                        "respect_quiet_hours", True
                    ),
                    respect_preferences=notification.metadata.get(
                        "respect_preferences", True
                    ),
                )
                dispatched += 1
            except Exception:
                logger.exception(
                    "redispatch_failed",
                    notification_id=str(notification.notification_id),
                )

        logger.info("redispatch_completed", due=len(due), dispatched=dispatched)
        return dispatched

    def mark_as_read(self, notification_id: UUID | str) -> Notification:
        """Set ``read`` and ``read_at`` once. Repeated calls are no-ops.

        Raises:
            NotificationNotFoundError: If the notification does not exist.
        """
        return self._mark(notification_id, "read")

    def mark_as_clicked(
        self, notification_id: UUID | str, action_taken: str | None = None
    ) -> Notification:
        """Set ``clicked`` and ``clicked_at`` once, with the optional action.

        Raises:
            NotificationNotFoundError: If the notification does not exist.
        """
        extra = {"action_taken": action_taken} if action_taken else {}
        return self._mark(notification_id, "clicked", **extra)

    def mark_as_dismissed(self, notification_id: UUID | str) -> Notification:
        """Set ``dismissed`` and ``dismissed_at`` once.

        Raises:
            NotificationNotFoundError: If the notification does not exist.
        """
        return self._mark(notification_id, "dismissed")

    def _mark(
        self, notification_id: UUID | str, flag: str, **extra: Any
    ) -> Notification:
        notification = NotificationRepository.get(notification_id)
        if NotificationRepository.set_flag(
            notification.notification_id, flag, self.clock(), **extra
        ):
            logger.info(
                f"notification_marked_{flag}",
                notification_id=str(notification.notification_id),
            )
            notification.refresh_from_db()
        return notification

    def mark_all_as_read(self, recipient_id: str) -> int:
        """Mark every unread notification of a recipient as read.

        Returns:
            Number of notifications changed.
        """
        count = NotificationRepository.mark_all_read(recipient_id, self.clock())
        logger.info("notifications_marked_read", recipient_id=recipient_id, count=count)
        return count


dispatcher = DeliveryDispatcher()
