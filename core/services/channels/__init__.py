"""Provider adapters, one per delivery channel."""

from core.services.channels.base import ChannelAdapter, HttpGatewayAdapter
from core.services.channels.registry import build_adapters

__all__ = ["ChannelAdapter", "HttpGatewayAdapter", "build_adapters"]
