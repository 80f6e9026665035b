"""Exception handling utilities for the notification engine."""

from core.exceptions.engine_exceptions import (
    BatchNotFoundError,
    ExpansionError,
    InvalidTransitionError,
    NotFoundError,
    NotificationEngineError,
    NotificationNotFoundError,
    ProviderError,
    TemplateNotFoundError,
    ValidationError,
)

__all__ = [
    "BatchNotFoundError",
    "ExpansionError",
    "InvalidTransitionError",
    "NotFoundError",
    "NotificationEngineError",
    "NotificationNotFoundError",
    "ProviderError",
    "TemplateNotFoundError",
    "ValidationError",
]
