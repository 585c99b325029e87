"""Repository layer - data access abstraction."""

from src.tenant_invites.repositories.base import BaseRepository
from src.tenant_invites.repositories.invitation import InvitationRepository
from src.tenant_invites.repositories.tenant import TenantRepository
from src.tenant_invites.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "InvitationRepository",
    "TenantRepository",
    "UserRepository",
]
