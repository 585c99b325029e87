"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Set test environment before any app imports
os.environ.setdefault("APP_ENV", "testing")
# Cheap hashing: the hashers are built at import time from these settings
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")
# Emails are never sent from tests
os.environ["RESEND_API_KEY"] = ""

# ruff: noqa: E402 - Imports must be after env var setup
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.tenant_invites.core.config import get_settings
from src.tenant_invites.core.logging import clear_request_context

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def tenant_id() -> UUID:
    """Create a test tenant ID."""
    return uuid4()


@pytest.fixture
def inviter_id() -> UUID:
    """Create a test inviter user ID."""
    return uuid4()


@pytest.fixture
def notifier() -> AsyncMock:
    """Notifier double that records every invitation it is asked to send."""
    mock = AsyncMock()
    mock.send_invitation = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def failing_notifier() -> AsyncMock:
    """Notifier double whose delivery always fails."""
    from src.tenant_invites.core.exceptions import TransportError

    mock = AsyncMock()
    mock.send_invitation = AsyncMock(side_effect=TransportError("SMTP unavailable"))
    return mock


@pytest.fixture
def capturing_logger():
    """Route structlog output to a CapturingLogger for the duration of a test."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)
