"""Correlation IDs for log lines emitted by requests and rq jobs.

HTTP requests carry the ``X-Request-ID`` they arrived with (or a new one);
background jobs use their rq job ID, so a campaign run or a retry round can
be followed across log files.
"""

import functools
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from rq import get_current_job

_correlation = threading.local()


def get_request_id() -> str | None:
    """Return the correlation ID bound to the current thread, if any."""
    return getattr(_correlation, "request_id", None)


def set_request_id(request_id: str) -> None:
    """Bind ``request_id`` to the current thread."""
    _correlation.request_id = request_id


def clear_request_id() -> None:
    """Drop the correlation ID of the current thread."""
    _correlation.__dict__.pop("request_id", None)


@contextmanager
def request_id_bound(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` for the duration of the block.

    The previously bound ID (usually none) is restored on exit, also when
    the block raises.
    """
    previous = get_request_id()
    set_request_id(request_id)
    try:
        yield request_id
    finally:
        if previous is None:
            clear_request_id()
        else:
            set_request_id(previous)


def correlated_job(func: Callable[..., Any]) -> Callable[..., Any]:
    """Run an rq job function with its job ID as the correlation ID.

    Outside a worker (direct calls, tests) a fresh UUID is used.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        job = get_current_job()
        job_id = f"job-{job.id}" if job is not None else str(uuid.uuid4())
        with request_id_bound(job_id):
            return func(*args, **kwargs)

    return wrapper
