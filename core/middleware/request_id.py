"""Request ID middleware for correlating engine logs across services."""

import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from core.constants import REQUEST_ID_HEADER
from core.logging.context import request_id_bound


class RequestIDMiddleware:
    """Bind the gateway's ``X-Request-ID`` (or a new UUID) to the request.

    Log lines and error bodies produced while the request is handled carry
    the ID, and the response echoes it back.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        with request_id_bound(incoming or str(uuid.uuid4())) as request_id:
            request.request_id = request_id  # type: ignore[attr-defined]
            response = self.get_response(request)
        response[REQUEST_ID_HEADER] = request_id
        return response
