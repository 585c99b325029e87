"""Notifier interface consumed by the invitation saga."""

from typing import Protocol


class InviteNotifier(Protocol):
    """Delivers a raw invitation token to the invitee.

    Implementations must raise on any failure; there is no partial-send
    outcome. The saga awaits the call and compensates when it raises.
    """

    async def send_invitation(
        self,
        to_email: str,
        raw_token: str,
        inviter_name: str,
        tenant_name: str,
    ) -> None: ...
