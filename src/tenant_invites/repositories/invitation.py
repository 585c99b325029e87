"""Repository for Invitation entity."""

from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm.attributes import set_committed_value
from sqlmodel import select

from src.tenant_invites.models import Invitation, InvitationStatus, utc_now
from src.tenant_invites.repositories.base import BaseRepository


class InvitationRepository(BaseRepository[Invitation]):
    """Repository for Invitation entity.

    All lookups are tenant-scoped except ``list_pending_by_prefix``, which
    serves token acceptance where no tenant context exists yet.
    """

    model = Invitation

    async def get_for_tenant(
        self,
        invitation_id: UUID,
        tenant_id: UUID,
        for_update: bool = False,
    ) -> Invitation | None:
        """Get an invitation by ID, only if it belongs to the tenant.

        Args:
            invitation_id: Invitation row ID
            tenant_id: Tenant the invitation must belong to
            for_update: If True, locks the row until the transaction ends
        """
        query = select(Invitation).where(
            Invitation.id == invitation_id,
            Invitation.tenant_id == tenant_id,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_pending_by_email_and_tenant(
        self, email: str, tenant_id: UUID
    ) -> Invitation | None:
        """Get the pending invitation for email in tenant, if any."""
        result = await self.session.execute(
            select(Invitation).where(
                Invitation.email == email,
                Invitation.tenant_id == tenant_id,
                Invitation.status == InvitationStatus.PENDING.value,
            )
        )
        return result.scalars().first()

    async def list_pending_by_prefix(
        self, token_prefix: str, for_update: bool = False
    ) -> list[Invitation]:
        """List pending invitations whose token starts with the given prefix.

        Args:
            token_prefix: First 8 characters of the raw token
            for_update: If True, locks the candidate rows so a concurrent
                        revoke or resend waits for the accept to finish
        """
        query = select(Invitation).where(
            Invitation.token_prefix == token_prefix,
            Invitation.status == InvitationStatus.PENDING.value,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_tenant(self, tenant_id: UUID) -> list[Invitation]:
        """List all invitations for a tenant, newest first."""
        result = await self.session.execute(
            select(Invitation)
            .where(Invitation.tenant_id == tenant_id)
            .order_by(Invitation.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def save(self, invitation: Invitation) -> Invitation:
        """Stage changes to an invitation and flush them (no commit)."""
        invitation.updated_at = utc_now()
        self.session.add(invitation)
        await self.session.flush()
        return invitation

    async def mark_status(
        self,
        invitation: Invitation,
        status: InvitationStatus,
        token_hash: str | None = None,
    ) -> bool:
        """Move a pending invitation to a terminal status (no commit).

        The UPDATE only matches while the row is still PENDING in the
        database, and, when ``token_hash`` is given, still carries that hash.
        Returns False if another transaction resolved or re-issued the
        invitation first; the row is left untouched in that case.

        Terminal statuses never transition again, and nothing returns to PENDING.
        """
        if not status.is_terminal:
            raise ValueError(f"Cannot transition invitation to {status.value}")
        if not invitation.is_pending:
            raise ValueError(f"Invitation already {invitation.status_enum.value}")

        now = utc_now()
        query = update(Invitation).where(
            Invitation.id == invitation.id,
            Invitation.status == InvitationStatus.PENDING.value,
        )
        if token_hash is not None:
            query = query.where(Invitation.token_hash == token_hash)
        result = await self.session.execute(
            query.values(status=status.value, updated_at=now).execution_options(
                synchronize_session=False
            )
        )
        if result.rowcount == 0:
            return False

        set_committed_value(invitation, "status", status.value)
        set_committed_value(invitation, "updated_at", now)
        return True

    async def delete(self, invitation: Invitation) -> None:
        """Delete an invitation row (no commit)."""
        await self.session.delete(invitation)
        await self.session.flush()
