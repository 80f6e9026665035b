"""Notification engine configuration.

Values come from the ``NOTIFICATION_ENGINE`` dict in Django settings and are
read on every call so ``override_settings`` takes effect in tests.
Anything missing from settings falls back to ``ENGINE_DEFAULTS``.
"""

from typing import Any

from django.conf import settings

ENGINE_DEFAULTS: dict[str, Any] = {
    "QUEUE_NAME": "default",
    "CAMPAIGN_QUEUE_NAME": "default",
    "DEFAULT_MAX_RETRIES": 3,
    "DEFAULT_RETRY_DELAY_MINUTES": 5,
    "DEFAULT_BATCH_SIZE": 100,
    "SWEEP_LIMIT": 500,
    "REDISPATCH_LIMIT": 200,
    "CHANNEL_ADAPTERS": {},
    "PUSH_GATEWAY_URL": "",
    "PUSH_GATEWAY_API_KEY": "",
    "SMS_GATEWAY_URL": "",
    "SMS_GATEWAY_API_KEY": "",
    "SMS_SENDER_ID": "NOTIFY",
    "GATEWAY_TIMEOUT_SECONDS": 10,
}


def engine_setting(name: str) -> Any:
    """Return one engine setting.

    Raises:
        KeyError: If the name is neither configured nor a known default.
    """
    configured = getattr(settings, "NOTIFICATION_ENGINE", {})
    if name in configured:
        return configured[name]
    return ENGINE_DEFAULTS[name]
