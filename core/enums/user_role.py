"""User role enumeration for the external recipient directory."""

from enum import Enum


class UserRole(str, Enum):
    """Roles a recipient can hold in the user-management service.

    Campaign target criteria filter on these values.
    """

    ADMIN = "admin"
    MENTOR = "mentor"
    MENTEE = "mentee"
    CREATOR = "creator"
    USER = "user"
