"""Builds the channel adapter set from settings."""

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from core.config.engine import engine_setting
from core.enums import DeliveryChannel
from core.services.channels.base import ChannelAdapter


def build_adapters() -> dict[DeliveryChannel, ChannelAdapter]:
    """Instantiate the adapter configured for every channel.

    ``NOTIFICATION_ENGINE["CHANNEL_ADAPTERS"]`` maps channel values to dotted
    class paths.

    Raises:
        ImproperlyConfigured: If a channel has no adapter configured.
    """
    configured = engine_setting("CHANNEL_ADAPTERS")
    adapters = {}
    for channel in DeliveryChannel:
        path = configured.get(channel.value)
        if not path:
            raise ImproperlyConfigured(f"No adapter configured for {channel.value}")
        adapters[channel] = import_string(path)()
    return adapters
