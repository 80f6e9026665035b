"""Constants package for core application."""

from core.constants.engine import (
    DEFAULT_EXPIRED_SWEEP_LIMIT,
    PACING_SLICE_SECONDS,
    QUIET_HOURS_GATED_CHANNELS,
)
from core.constants.http import (
    PROCESS_TIME_HEADER,
    REQUEST_ID_HEADER,
    SLOW_REQUEST_THRESHOLD,
    USER_ID_HEADER,
)
from core.constants.preferences import DEFAULT_PREFERENCES, DefaultPreference

__all__ = [
    "DEFAULT_EXPIRED_SWEEP_LIMIT",
    "DEFAULT_PREFERENCES",
    "PACING_SLICE_SECONDS",
    "PROCESS_TIME_HEADER",
    "QUIET_HOURS_GATED_CHANNELS",
    "REQUEST_ID_HEADER",
    "SLOW_REQUEST_THRESHOLD",
    "USER_ID_HEADER",
    "DefaultPreference",
]
