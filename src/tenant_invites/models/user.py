"""User model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.tenant_invites.models.base import utc_now
from src.tenant_invites.models.enums import UserRole


class User(SQLModel, table=True):
    """User account. Email is unique across all tenants."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    name: str | None = Field(default=None, max_length=100)
    role: str = Field(default=UserRole.GUEST.value, max_length=50)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
