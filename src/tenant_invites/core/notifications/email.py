"""Invitation email delivery using Resend API."""

import asyncio
import html
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import resend

from src.tenant_invites.core.config import Settings, get_settings
from src.tenant_invites.core.exceptions import TransportError
from src.tenant_invites.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for the blocking Resend SDK call
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #6366f1; color: white; padding: 12px 32px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 600;"
)
_LINK_STYLE = "color: #6366f1; word-break: break-all;"
_MUTED_STYLE = "color: #6b7280; font-size: 14px;"


def build_accept_url(app_url: str, raw_token: str) -> str:
    """Build the set-password link embedded in the invitation email."""
    return f"{app_url}/auth/set-password?token={raw_token}"


class ResendInviteNotifier:
    """Sends invitation emails through Resend.

    Without RESEND_API_KEY the email is logged (minus the token) and treated
    as delivered, so local development works without an email provider.
    Any SDK error or timeout is raised as TransportError; nothing is retried.

    A timeout only stops waiting: the SDK call already running in the
    executor thread is not cancelled and may still deliver the email after
    the caller has deleted or restored the invitation. That email then
    carries a token that no longer verifies.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    async def send_invitation(
        self,
        to_email: str,
        raw_token: str,
        inviter_name: str,
        tenant_name: str,
    ) -> None:
        settings = self.settings

        if not settings.resend_api_key:
            logger.warning(
                "RESEND_API_KEY not set - invitation email not sent",
                to=to_email,
                email_type="invitation",
            )
            return

        resend.api_key = settings.resend_api_key
        params: dict[str, Any] = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": f"You've been invited to join {tenant_name}",
            "html": _get_invitation_email_html(
                tenant_name,
                inviter_name,
                build_accept_url(settings.app_url, raw_token),
                settings.invitation_expiry_hours,
            ),
        }

        def _send() -> None:
            resend.Emails.send(params)

        future = asyncio.wrap_future(_email_executor.submit(_send))
        try:
            await asyncio.wait_for(future, timeout=settings.email_send_timeout_seconds)
        except TimeoutError as e:
            logger.error(
                "Email send timed out",
                to=to_email,
                timeout=settings.email_send_timeout_seconds,
            )
            raise TransportError("Invitation email timed out") from e
        except Exception as e:
            logger.error("Failed to send invitation email", to=to_email, error=str(e))
            raise TransportError("Failed to send invitation email") from e

        logger.info("Invitation email sent", to=to_email)


def _get_invitation_email_html(
    tenant_name: str, inviter_name: str, accept_url: str, expiry_hours: int
) -> str:
    """Generate HTML content for invitation email."""
    safe_tenant_name = html.escape(tenant_name)
    safe_inviter_name = html.escape(inviter_name)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #6366f1; margin-bottom: 24px;">You've been invited to join {safe_tenant_name}</h1>
    <p>{safe_inviter_name} has invited you to join <strong>{safe_tenant_name}</strong>.</p>
    <p>Click the button below to set your password and get started:</p>
    <p style="margin: 32px 0;">
        <a href="{accept_url}" style="{_BUTTON_STYLE}">Set Your Password</a>
    </p>
    <p style="{_MUTED_STYLE}">
        Or copy and paste this link into your browser:<br>
        <a href="{accept_url}" style="{_LINK_STYLE}">{accept_url}</a>
    </p>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        This link expires in {expiry_hours} hours. If you didn't expect this invitation,
        you can safely ignore this email.
    </p>
</body>
</html>"""
