"""Repository for Tenant entity."""

from src.tenant_invites.models import Tenant
from src.tenant_invites.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant entity."""

    model = Tenant
