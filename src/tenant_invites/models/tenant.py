"""Tenant model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.tenant_invites.models.base import utc_now


class Tenant(SQLModel, table=True):
    """Tenant registry. Only the display name matters to invitations."""

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
