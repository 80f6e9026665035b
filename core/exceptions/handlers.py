"""DRF exception handler for the notification engine API."""

import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from django.conf import settings
from django.http import Http404

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions.engine_exceptions import (
    InvalidTransitionError,
    NotificationEngineError,
    ValidationError,
)
from core.logging.context import get_request_id

logger = logging.getLogger(__name__)


def custom_exception_handler(
    exc: Exception, context: dict[str, Any]
) -> Response | None:
    """Turn exceptions raised by engine views into JSON responses.

    DRF formats its own exceptions (and ``Http404``). Engine errors use the
    status code declared on their class with the body
    ``{status, message, request_id, timestamp}``; validation errors add
    ``errors`` and batch state conflicts use an ``error: conflict`` body.
    Anything else is a 500.

    Args:
        exc: The exception that was raised.
        context: DRF context holding the view and request.

    Returns:
        The error response.
    """
    request_id = get_request_id()
    response = exception_handler(exc, context)

    if response is None:
        if isinstance(exc, NotificationEngineError):
            body = _engine_error_body(exc, request_id)
            response = Response(body, status=exc.status_code)
        else:
            response = Response(
                _error_body(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "An internal server error occurred.",
                    request_id,
                ),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

    if request_id:
        response["X-Request-ID"] = request_id

    view = context.get("view")
    _log_exception(exc, getattr(view, "request", None), response.status_code)
    return response


def _engine_error_body(
    exc: NotificationEngineError, request_id: str | None
) -> dict[str, Any]:
    if isinstance(exc, InvalidTransitionError):
        return {
            "error": "conflict",
            "message": str(exc),
            "detail": exc.detail,
            "request_id": request_id,
            "timestamp": datetime.now(UTC).isoformat(),
        }
    body = _error_body(exc.status_code, str(exc), request_id)
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    return body


def _error_body(
    status_code: int, message: str, request_id: str | None
) -> dict[str, Any]:
    return {
        "status": status_code,
        "message": message,
        "request_id": request_id,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def _log_exception(exc: Exception, request: Any, status_code: int) -> None:
    """Log client errors as warnings and everything else as errors.

    The stack trace is appended when DEBUG is on.
    """
    client_error = 400 <= status_code < 500 and isinstance(
        exc, (Http404, APIException, NotificationEngineError)
    )
    method = getattr(request, "method", "unknown")
    path = getattr(request, "path", "unknown")

    message = (
        f"Exception occurred: {type(exc).__name__}: {exc} | "
        f"Path: {method} {path} | Status: {status_code}"
    )
    if settings.DEBUG:
        message += "\nStack trace:\n" + "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )

    logger.log(logging.WARNING if client_error else logging.ERROR, message)
