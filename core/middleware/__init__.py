"""Middleware components for the notification engine."""

from core.middleware.identity_context import IdentityContextMiddleware
from core.middleware.process_time import ProcessTimeMiddleware
from core.middleware.request_id import RequestIDMiddleware

__all__ = [
    "IdentityContextMiddleware",
    "ProcessTimeMiddleware",
    "RequestIDMiddleware",
]
