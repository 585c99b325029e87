from src.tenant_invites.schemas.invitation import (
    AcceptInvitationRequest,
    InvitationCreateRequest,
    InvitationRead,
)

__all__ = ["AcceptInvitationRequest", "InvitationCreateRequest", "InvitationRead"]
