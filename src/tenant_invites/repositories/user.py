"""Repository for User entity."""

from uuid import UUID

from sqlmodel import select

from src.tenant_invites.models import User, UserRole
from src.tenant_invites.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity.

    Email lookups are deliberately not tenant-scoped: an email may hold
    only one account across all tenants.
    """

    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        user = await self.get_by_email(email)
        return user is not None

    async def create_account(
        self,
        email: str,
        password_hash: str,
        role: UserRole,
        tenant_id: UUID,
        name: str | None = None,
    ) -> UUID:
        """Insert an active user and flush to obtain its ID (no commit)."""
        user = User(
            email=email,
            hashed_password=password_hash,
            role=role.value,
            tenant_id=tenant_id,
            name=name,
            is_active=True,
        )
        self.add(user)
        await self.session.flush()
        return user.id
