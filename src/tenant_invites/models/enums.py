"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Role assigned to a user within their tenant."""

    BUBBLE_ADMIN = "bubble_admin"
    CUSTOMER_ADMIN = "customer_admin"
    CREATOR = "creator"
    GUEST = "guest"


class InvitationStatus(str, Enum):
    """Invitation lifecycle status.

    PENDING is the only non-terminal state.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    REVOKED = "revoked"

    @property
    def is_terminal(self) -> bool:
        return self is not InvitationStatus.PENDING
