"""Test data builders for the engine models.

Each builder fills required fields with Faker values and accepts keyword
overrides for anything a test cares about.
"""

from datetime import UTC, datetime
from typing import Any

from faker import Faker

from core.enums import DeliveryChannel, NotificationType
from core.models import (
    Notification,
    NotificationBatch,
    NotificationTemplate,
    User,
)
from core.services.channels import ChannelAdapter

fake = Faker()


def fixed_clock(value: datetime):
    """Clock callable that always returns ``value``."""
    return lambda: value


def utc(*args: int) -> datetime:
    """Aware UTC datetime shorthand."""
    return datetime(*args, tzinfo=UTC)


def create_user(**overrides: Any) -> User:
    """Create a directory user with contact details on file."""
    fields = {
        "user_id": fake.uuid4(),
        "role": "user",
        "email": fake.email(),
        "phone_number": "+15555550100",
        "device_tokens": [fake.sha1()],
        "tags": [],
        "location": fake.city(),
        "is_active": True,
    }
    fields.update(overrides)
    return User.objects.create(**fields)


def create_template(**overrides: Any) -> NotificationTemplate:
    """Create an active template of type ``session``."""
    fields = {
        "template_id": fake.slug(),
        "name": fake.sentence(nb_words=3),
        "type": NotificationType.SESSION.value,
        "title": "Hi {{name}}",
        "body": "Your session with {{mentor}} starts soon",
        "max_retries": 3,
        "retry_delay_minutes": 5,
        "expiry_hours": 0,
    }
    fields.update(overrides)
    return NotificationTemplate.objects.create(**fields)


def create_notification(**overrides: Any) -> Notification:
    """Create a pending notification on every channel."""
    fields = {
        "recipient_id": fake.uuid4(),
        "type": NotificationType.SESSION.value,
        "title": fake.sentence(nb_words=4),
        "body": fake.paragraph(),
    }
    fields.update(overrides)
    return Notification.objects.create(**fields)


def create_batch(template: NotificationTemplate, **overrides: Any) -> NotificationBatch:
    """Create a draft batch for the given template."""
    fields = {
        "name": fake.catch_phrase(),
        "template": template,
        "target_users": [],
        "target_criteria": {},
    }
    fields.update(overrides)
    return NotificationBatch.objects.create(**fields)


class RecordingAdapter(ChannelAdapter):
    """Channel adapter double that records submissions.

    ``results`` is consumed one item per call; an exception instance is
    raised, anything else is returned. When exhausted, ``default`` is used.
    """

    def __init__(self, channel: DeliveryChannel, results=None, default=True):
        self.channel = channel
        self.results = list(results or [])
        self.default = default
        self.calls: list[dict[str, Any]] = []

    def send(self, address, title, body, payload):
        self.calls.append(
            {"address": address, "title": title, "body": body, "payload": payload}
        )
        result = self.results.pop(0) if self.results else self.default
        if isinstance(result, Exception):
            raise result
        return result


def recording_adapters(**per_channel) -> dict[DeliveryChannel, RecordingAdapter]:
    """One RecordingAdapter per channel; kwargs override by channel value."""
    return {
        channel: per_channel.get(channel.value) or RecordingAdapter(channel)
        for channel in DeliveryChannel
    }
