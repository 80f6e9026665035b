"""Thread-local context holding the caller identity set by the gateway."""

import threading

from rest_framework.exceptions import AuthenticationFailed

_identity_context = threading.local()


def set_current_user_id(user_id: str) -> None:
    """Store the caller's user ID in thread-local storage."""
    _identity_context.user_id = user_id


def get_current_user_id() -> str | None:
    """Return the caller's user ID, or None outside an identified request."""
    return getattr(_identity_context, "user_id", None)


def require_current_user_id() -> str:
    """Return the caller's user ID or raise.

    Raises:
        AuthenticationFailed: If the request carried no identity.
    """
    user_id = get_current_user_id()
    if not user_id:
        raise AuthenticationFailed("X-User-ID header is required")
    return user_id


def clear_current_user_id() -> None:
    """Clear the caller identity after the request completes."""
    if hasattr(_identity_context, "user_id"):
        delattr(_identity_context, "user_id")
