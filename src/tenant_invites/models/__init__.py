"""Model exports.

Import from here: `from src.tenant_invites.models import Invitation, User`
"""

from src.tenant_invites.models.base import utc_now
from src.tenant_invites.models.enums import InvitationStatus, UserRole
from src.tenant_invites.models.invitation import Invitation
from src.tenant_invites.models.tenant import Tenant
from src.tenant_invites.models.user import User

__all__ = [
    # Enums
    "InvitationStatus",
    "UserRole",
    # Models
    "Invitation",
    "Tenant",
    "User",
    # Helpers
    "utc_now",
]
