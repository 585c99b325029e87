"""Uniqueness pre-checks run before an invitation token is minted or accepted.

These are advisory. Concurrent callers can pass both checks; the unique
indexes on ``users.email`` and on pending ``(email, tenant_id)`` invitations
decide the race, and the service reports the loser with the same
ConflictError.
"""

from uuid import UUID

from src.tenant_invites.core.exceptions import ConflictError
from src.tenant_invites.repositories import InvitationRepository, UserRepository

EMAIL_EXISTS = "A user with this email already exists"
PENDING_INVITATION_EXISTS = "A pending invitation already exists for this email in this tenant"


class UniquenessGuards:
    def __init__(self, user_repo: UserRepository, invitation_repo: InvitationRepository):
        self.user_repo = user_repo
        self.invitation_repo = invitation_repo

    async def check_email_globally_unique(self, email: str) -> None:
        """Fail if any user, in any tenant, already has this email."""
        if await self.user_repo.exists_by_email(email):
            raise ConflictError(EMAIL_EXISTS)

    async def check_no_pending_invitation(self, email: str, tenant_id: UUID) -> None:
        """Fail if the tenant already has a pending invitation for this email."""
        existing = await self.invitation_repo.get_pending_by_email_and_tenant(email, tenant_id)
        if existing is not None:
            raise ConflictError(PENDING_INVITATION_EXISTS)
