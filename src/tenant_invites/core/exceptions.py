"""Domain exceptions raised by the invitation saga.

Each carries the HTTP status an upstream API layer should map it to.
"""


class InvitationError(Exception):
    """Base class for invitation domain errors."""

    status_code: int = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ConflictError(InvitationError):
    """Email already has an account, or a pending invitation already exists."""

    status_code = 409


class BadRequestError(InvitationError):
    """Invalid or expired token, unknown role, or invitation in the wrong state."""

    status_code = 400


class NotFoundError(InvitationError):
    """Invitation does not exist for the given tenant."""

    status_code = 404


class TransportError(InvitationError):
    """Invitation email could not be delivered."""

    status_code = 502
