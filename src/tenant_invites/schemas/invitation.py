"""Invitation schemas."""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_serializer, field_validator

from src.tenant_invites.models import UserRole


class InvitationCreateRequest(BaseModel):
    """Request to invite someone into the caller's tenant."""

    email: EmailStr
    role: UserRole = UserRole.CREATOR
    name: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class AcceptInvitationRequest(BaseModel):
    """Accept an invitation by setting a password."""

    token: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=8, max_length=100)


class InvitationRead(BaseModel):
    """Public projection of an invitation.

    Never carries the token, its hash, or its prefix.
    """

    id: UUID
    email: str
    role: str
    status: str
    invited_by: UUID
    inviter_name: str | None
    expires_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("expires_at", "created_at")
    def serialize_timestamp(self, value: datetime) -> str:
        # Stored naive in UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.isoformat()
