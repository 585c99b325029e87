"""Logging configuration using structlog."""

import functools
import logging
import sys
from collections.abc import Awaitable, Callable
from uuid import UUID

import structlog
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    get_contextvars,
    unbind_contextvars,
)

_INVITATION_CONTEXT_KEYS = ("tenant_id", "invitation_id", "invitee_email")


def setup_logging(debug: bool = False) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: If True, use colored console output. If False, use JSON for production.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors = shared_processors + [structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Set library log levels to reduce noise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Bind request-level context to all subsequent log calls."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_invitation_context(
    tenant_id: UUID,
    invitation_id: UUID | None = None,
    email: str | None = None,
) -> None:
    """Bind invitation-level context to all subsequent log calls.

    Args:
        tenant_id: Tenant the invitation belongs to.
        invitation_id: Invitation row ID, once known.
        email: Invitee email. Only bound if settings.log_user_emails is True
               (GDPR compliance).
    """
    from src.tenant_invites.core.config import get_settings

    bind_contextvars(tenant_id=str(tenant_id))
    if invitation_id is not None:
        bind_contextvars(invitation_id=str(invitation_id))
    settings = get_settings()
    if email and settings.log_user_emails:
        bind_contextvars(invitee_email=email)


def invitation_context_scope[**P, R](
    func: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[R]]:
    """Undo any invitation context bound while the wrapped coroutine runs.

    Without a request middleware to clear context, this keeps one saga
    call's tenant_id and invitation_id out of the next call's log events.
    Values bound by an outer scope are restored on exit.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        context = get_contextvars()
        saved = {key: context[key] for key in _INVITATION_CONTEXT_KEYS if key in context}
        try:
            return await func(*args, **kwargs)
        finally:
            unbind_contextvars(*_INVITATION_CONTEXT_KEYS)
            if saved:
                bind_contextvars(**saved)

    return wrapper


def clear_request_context() -> None:
    """Clear all request-scoped context."""
    clear_contextvars()
