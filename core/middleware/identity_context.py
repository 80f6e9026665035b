"""Identity context middleware for the gateway-provided caller ID."""

from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

import structlog

from core.auth.context import clear_current_user_id, set_current_user_id
from core.constants import USER_ID_HEADER

logger = structlog.get_logger(__name__)


class IdentityContextMiddleware:
    """Store the caller identity from the ``X-User-ID`` header.

    Authentication happens upstream at the gateway; this middleware only
    makes the forwarded identity available via ``get_current_user_id()``
    and clears it when the request is finished.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize the middleware.

        Args:
            get_response: The next middleware or view in the chain.
        """
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process the request with the identity context set."""
        user_id = request.headers.get(USER_ID_HEADER, "").strip()
        if user_id:
            set_current_user_id(user_id)
            logger.debug("identity_context_set", user_id=user_id)

        try:
            return self.get_response(request)
        finally:
            clear_current_user_id()
