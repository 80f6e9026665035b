"""Delivery and campaign engine constants."""

from core.enums import DeliveryChannel

# In-app notifications only land in the inbox, so quiet hours never hold them.
QUIET_HOURS_GATED_CHANNELS = frozenset(
    {DeliveryChannel.PUSH, DeliveryChannel.EMAIL, DeliveryChannel.SMS}
)

DEFAULT_EXPIRED_SWEEP_LIMIT = 500

# Inter-chunk pacing sleeps in slices so cancellation is noticed mid-wait
PACING_SLICE_SECONDS = 1.0
