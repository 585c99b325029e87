"""Tenant invitation service.

Create and Resend are not atomic with the email they send: the row change
is committed first, and if the notifier then fails the change is undone by
a compensating write (delete on create, restore on resend) before the
notifier's error is re-raised. Accept writes the new user and the
invitation status in one transaction.
"""

import asyncio
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.tenant_invites.core.config import get_settings
from src.tenant_invites.core.exceptions import (
    BadRequestError,
    ConflictError,
    InvitationError,
    NotFoundError,
)
from src.tenant_invites.core.logging import (
    bind_invitation_context,
    get_logger,
    invitation_context_scope,
)
from src.tenant_invites.core.notifications import InviteNotifier
from src.tenant_invites.core.security import (
    hash_password,
    mint_invite_token,
    token_prefix,
    verify_invite_token,
)
from src.tenant_invites.models import Invitation, InvitationStatus, UserRole, utc_now
from src.tenant_invites.repositories import (
    InvitationRepository,
    TenantRepository,
    UserRepository,
)
from src.tenant_invites.schemas import InvitationRead
from src.tenant_invites.services.uniqueness import (
    EMAIL_EXISTS,
    PENDING_INVITATION_EXISTS,
    UniquenessGuards,
)

logger = get_logger(__name__)

# Same message for unknown and expired tokens
INVALID_INVITATION = "Invalid or expired invitation"
DEFAULT_TENANT_NAME = "your organization"
DEFAULT_INVITER_NAME = "Admin"


def parse_role(role: str | UserRole) -> UserRole:
    """Parse a role string into UserRole, rejecting unknown values."""
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role.strip().lower())
    except ValueError as e:
        raise BadRequestError(f"Unknown role: {role}") from e


def normalize_email(email: str) -> str:
    return email.strip().lower()


class InvitationService:
    """Service for the invitation lifecycle: create, accept, resend, revoke."""

    def __init__(
        self,
        invitation_repo: InvitationRepository,
        user_repo: UserRepository,
        tenant_repo: TenantRepository,
        session: AsyncSession,
        notifier: InviteNotifier,
        expiry_hours: int | None = None,
    ):
        self.invitation_repo = invitation_repo
        self.user_repo = user_repo
        self.tenant_repo = tenant_repo
        self.session = session
        self.notifier = notifier
        self.guards = UniquenessGuards(user_repo, invitation_repo)
        self.expiry_hours = (
            expiry_hours if expiry_hours is not None else get_settings().invitation_expiry_hours
        )

    def _new_expiry(self) -> datetime:
        return utc_now() + timedelta(hours=self.expiry_hours)

    async def _resolve_tenant_name(self, tenant_id: UUID) -> str:
        """Display name for the email. A missing tenant never fails the saga."""
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        return tenant.name if tenant else DEFAULT_TENANT_NAME

    @invitation_context_scope
    async def create_invitation(
        self,
        email: str,
        role: str | UserRole,
        tenant_id: UUID,
        inviter_id: UUID,
        inviter_name: str,
        name: str | None = None,
    ) -> InvitationRead:
        """Create a pending invitation and email its token.

        If the email cannot be sent, the invitation row is deleted again and
        the notifier's error is re-raised unchanged.
        """
        email = normalize_email(email)
        user_role = parse_role(role)
        bind_invitation_context(tenant_id, email=email)

        try:
            await self.guards.check_email_globally_unique(email)
            await self.guards.check_no_pending_invitation(email, tenant_id)

            tenant_name = await self._resolve_tenant_name(tenant_id)

            token = await asyncio.to_thread(mint_invite_token)
            invitation = Invitation(
                email=email,
                tenant_id=tenant_id,
                role=user_role.value,
                token_hash=token.token_hash,
                token_prefix=token.prefix,
                status=InvitationStatus.PENDING.value,
                invited_by=inviter_id,
                inviter_name=inviter_name,
                name=name,
                expires_at=self._new_expiry(),
            )
            self.invitation_repo.add(invitation)
            await self.session.commit()

        except IntegrityError as e:
            await self.session.rollback()
            # Lost a race past the pre-checks
            if await self.invitation_repo.get_pending_by_email_and_tenant(email, tenant_id):
                raise ConflictError(PENDING_INVITATION_EXISTS) from e
            logger.error("Failed to create invitation", error=str(e))
            raise
        except InvitationError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create invitation", error=str(e))
            raise

        try:
            await self.notifier.send_invitation(email, token.raw, inviter_name, tenant_name)
        except Exception as e:
            logger.error(
                "Invitation email failed, rolling back invitation",
                invitation_id=str(invitation.id),
                error=str(e),
            )
            await self._delete_unsent(invitation)
            raise

        logger.info(
            "Invitation created",
            invitation_id=str(invitation.id),
            tenant_id=str(tenant_id),
            invited_by=str(inviter_id),
            token_prefix=invitation.token_prefix,
        )
        return InvitationRead.model_validate(invitation)

    async def _delete_unsent(self, invitation: Invitation) -> None:
        """Compensating delete for an invitation whose email never went out."""
        try:
            await self.invitation_repo.delete(invitation)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            # The caller still receives the notifier error
            logger.error(
                "Compensating delete failed, invitation left pending",
                invitation_id=str(invitation.id),
                error=str(e),
            )

    @invitation_context_scope
    async def accept_invitation(self, raw_token: str, password: str) -> UUID:
        """Accept an invitation and create the invitee's account.

        Returns the new user's ID. Unknown and expired tokens fail with the
        same BadRequestError so callers cannot probe which tokens exist.
        """
        try:
            candidates = await self.invitation_repo.list_pending_by_prefix(
                token_prefix(raw_token), for_update=True
            )
            invitation = await self._match_token(raw_token, candidates)
            if invitation is None:
                raise BadRequestError(INVALID_INVITATION)

            bind_invitation_context(invitation.tenant_id, invitation_id=invitation.id)

            if invitation.is_expired(utc_now()):
                # Expiry is recorded even though the accept fails
                if await self.invitation_repo.mark_status(invitation, InvitationStatus.EXPIRED):
                    await self.session.commit()
                    logger.info("Invitation expired on accept", invitation_id=str(invitation.id))
                raise BadRequestError(INVALID_INVITATION)

            # A user may have registered this email since the invitation was sent
            await self.guards.check_email_globally_unique(invitation.email)

            password_hash = await asyncio.to_thread(hash_password, password)
            user_id = await self.user_repo.create_account(
                email=invitation.email,
                password_hash=password_hash,
                role=parse_role(invitation.role),
                tenant_id=invitation.tenant_id,
                name=invitation.name,
            )
            accepted = await self.invitation_repo.mark_status(
                invitation, InvitationStatus.ACCEPTED, token_hash=invitation.token_hash
            )
            if not accepted:
                # Another transaction resolved or re-issued it after the match
                logger.info("Invitation resolved concurrently", invitation_id=str(invitation.id))
                raise BadRequestError(INVALID_INVITATION)

            # Capture IDs before commit
            invitation_id = str(invitation.id)
            tenant_id = str(invitation.tenant_id)

            await self.session.commit()

            logger.info(
                "Invitation accepted",
                invitation_id=invitation_id,
                tenant_id=tenant_id,
                user_id=str(user_id),
            )
            return user_id

        except IntegrityError as e:
            await self.session.rollback()
            # users.email unique index: account created concurrently
            raise ConflictError(EMAIL_EXISTS) from e
        except InvitationError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to accept invitation", error=str(e))
            raise

    async def _match_token(
        self, raw_token: str, candidates: list[Invitation]
    ) -> Invitation | None:
        for candidate in candidates:
            if await asyncio.to_thread(verify_invite_token, raw_token, candidate.token_hash):
                return candidate
        return None

    async def _get_pending_for_tenant(
        self, invitation_id: UUID, tenant_id: UUID, action: str
    ) -> Invitation:
        invitation = await self.invitation_repo.get_for_tenant(
            invitation_id, tenant_id, for_update=True
        )
        if invitation is None:
            raise NotFoundError("Invitation not found")
        if not invitation.is_pending:
            raise BadRequestError(f"Only pending invitations can be {action}")
        return invitation

    @invitation_context_scope
    async def resend_invitation(self, invitation_id: UUID, tenant_id: UUID) -> InvitationRead:
        """Issue a fresh token for a pending invitation and email it.

        The previous token stops working as soon as the new hash is written.
        If the email fails, the hash, prefix and expiry from before this call
        are restored and the notifier's error is re-raised.
        """
        bind_invitation_context(tenant_id, invitation_id=invitation_id)

        try:
            invitation = await self._get_pending_for_tenant(invitation_id, tenant_id, "resent")
            previous = (invitation.token_hash, invitation.token_prefix, invitation.expires_at)

            tenant_name = await self._resolve_tenant_name(tenant_id)

            token = await asyncio.to_thread(mint_invite_token)
            invitation.token_hash = token.token_hash
            invitation.token_prefix = token.prefix
            invitation.expires_at = self._new_expiry()
            await self.invitation_repo.save(invitation)
            await self.session.commit()

        except InvitationError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to resend invitation", error=str(e))
            raise

        try:
            await self.notifier.send_invitation(
                invitation.email,
                token.raw,
                invitation.inviter_name or DEFAULT_INVITER_NAME,
                tenant_name,
            )
        except Exception as e:
            logger.error(
                "Invitation email failed, restoring previous token",
                invitation_id=str(invitation_id),
                error=str(e),
            )
            await self._restore_token(invitation, *previous)
            raise

        logger.info(
            "Invitation resent",
            invitation_id=str(invitation_id),
            token_prefix=invitation.token_prefix,
        )
        return InvitationRead.model_validate(invitation)

    async def _restore_token(
        self,
        invitation: Invitation,
        token_hash: str,
        prefix: str,
        expires_at: datetime,
    ) -> None:
        """Compensating update: put back the token state from before a failed resend."""
        try:
            invitation.token_hash = token_hash
            invitation.token_prefix = prefix
            invitation.expires_at = expires_at
            await self.invitation_repo.save(invitation)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Compensating token restore failed, new token left in place",
                invitation_id=str(invitation.id),
                error=str(e),
            )

    @invitation_context_scope
    async def revoke_invitation(self, invitation_id: UUID, tenant_id: UUID) -> InvitationRead:
        """Revoke a pending invitation."""
        bind_invitation_context(tenant_id, invitation_id=invitation_id)

        try:
            invitation = await self._get_pending_for_tenant(invitation_id, tenant_id, "revoked")
            if not await self.invitation_repo.mark_status(invitation, InvitationStatus.REVOKED):
                raise BadRequestError("Only pending invitations can be revoked")
            await self.session.commit()

            logger.info("Invitation revoked", invitation_id=str(invitation_id))
            return InvitationRead.model_validate(invitation)

        except InvitationError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to revoke invitation", error=str(e))
            raise

    async def list_invitations(self, tenant_id: UUID) -> list[InvitationRead]:
        """List a tenant's invitations, newest first."""
        invitations = await self.invitation_repo.list_by_tenant(tenant_id)
        return [InvitationRead.model_validate(invitation) for invitation in invitations]
