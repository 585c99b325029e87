from src.tenant_invites.services.invitation_service import InvitationService
from src.tenant_invites.services.uniqueness import UniquenessGuards

__all__ = ["InvitationService", "UniquenessGuards"]
