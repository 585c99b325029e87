"""Invitation model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from src.tenant_invites.models.base import utc_now
from src.tenant_invites.models.enums import InvitationStatus

_PENDING_ONLY = text("status = 'pending'")


class Invitation(SQLModel, table=True):
    """Pending or resolved invitation for an email to join a tenant.

    ``token_hash`` is an Argon2id hash of the raw token and must never leave
    the repository layer. ``token_prefix`` is the first 8 hex characters of
    the raw token, kept in clear text purely as a lookup index.
    """

    __tablename__ = "invitations"
    __table_args__ = (
        # At most one pending invitation per (email, tenant)
        Index(
            "uq_invitations_pending_email_tenant",
            "email",
            "tenant_id",
            unique=True,
            postgresql_where=_PENDING_ONLY,
            sqlite_where=_PENDING_ONLY,
        ),
        Index("ix_invitations_token_prefix_status", "token_prefix", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, index=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    role: str = Field(max_length=50)
    token_hash: str = Field(max_length=255)
    token_prefix: str = Field(max_length=8)
    status: str = Field(default=InvitationStatus.PENDING.value, max_length=20)
    invited_by: UUID
    inviter_name: str | None = Field(default=None, max_length=100)
    name: str | None = Field(default=None, max_length=100)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> InvitationStatus:
        """Get status as InvitationStatus enum."""
        return InvitationStatus(self.status)

    @property
    def is_pending(self) -> bool:
        return self.status_enum is InvitationStatus.PENDING

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def __repr__(self) -> str:
        return (
            f"Invitation(id={self.id!s}, tenant_id={self.tenant_id!s}, "
            f"status={self.status!r}, token_prefix={self.token_prefix!r})"
        )

    __str__ = __repr__
