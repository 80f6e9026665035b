"""Logging utilities for the notification engine."""

from core.logging.config import setup_logging
from core.logging.context import (
    clear_request_id,
    correlated_job,
    get_request_id,
    request_id_bound,
    set_request_id,
)

__all__ = [
    "clear_request_id",
    "correlated_job",
    "get_request_id",
    "request_id_bound",
    "set_request_id",
    "setup_logging",
]
