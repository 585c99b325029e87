"""Integration test fixtures for database operations.

Each test gets a fresh SQLite database file, so tests never share rows.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.tenant_invites.core.db import create_tables, get_session
from src.tenant_invites.models import Tenant
from src.tenant_invites.repositories import (
    InvitationRepository,
    TenantRepository,
    UserRepository,
)
from src.tenant_invites.services import InvitationService
from tests.factories import TenantFactory


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a test database engine with all tables."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'invitations.db'}",
        poolclass=NullPool,
    )
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session used by the service under test.

    Tests reading back results should open a second session through
    `read_session` so they only see committed state.
    """
    async with get_session(engine) as session:
        yield session


@pytest.fixture
def read_session(engine: AsyncEngine):
    """Factory for independent sessions that observe committed rows."""

    def _open():
        return get_session(engine)

    return _open


@pytest.fixture
async def test_tenant(db_session: AsyncSession) -> Tenant:
    """Create a committed tenant named Acme Corp."""
    tenant = TenantFactory.build(name="Acme Corp")
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest.fixture
def make_service(db_session: AsyncSession):
    """Build an InvitationService over real repositories and the given notifier."""

    def _make(notifier: AsyncMock, expiry_hours: int | None = None) -> InvitationService:
        return InvitationService(
            invitation_repo=InvitationRepository(db_session),
            user_repo=UserRepository(db_session),
            tenant_repo=TenantRepository(db_session),
            session=db_session,
            notifier=notifier,
            expiry_hours=expiry_hours,
        )

    return _make
