"""Notification utilities - invitation email."""

from src.tenant_invites.core.notifications.base import InviteNotifier
from src.tenant_invites.core.notifications.email import ResendInviteNotifier, build_accept_url

__all__ = [
    "InviteNotifier",
    "ResendInviteNotifier",
    "build_accept_url",
]
