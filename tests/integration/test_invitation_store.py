"""Integration tests for the invitation and user repositories and the uniqueness guards."""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.tenant_invites.core.exceptions import ConflictError
from src.tenant_invites.models import Invitation, InvitationStatus, User, UserRole
from src.tenant_invites.repositories import InvitationRepository, UserRepository
from src.tenant_invites.services import UniquenessGuards
from tests.factories import InvitationFactory, UserFactory

pytestmark = pytest.mark.integration


@pytest.fixture
def invitation_repo(db_session) -> InvitationRepository:
    return InvitationRepository(db_session)


@pytest.fixture
def user_repo(db_session) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def guards(user_repo, invitation_repo) -> UniquenessGuards:
    return UniquenessGuards(user_repo, invitation_repo)


class TestInvitationRepository:
    async def test_list_pending_by_prefix_ignores_resolved_rows(
        self, invitation_repo, db_session, test_tenant
    ):
        pending = InvitationFactory.build(tenant_id=test_tenant.id, token_prefix="abcd1234")
        revoked = InvitationFactory.build(
            tenant_id=test_tenant.id,
            token_prefix="abcd1234",
            status=InvitationStatus.REVOKED.value,
        )
        other_prefix = InvitationFactory.build(tenant_id=test_tenant.id, token_prefix="ffff0000")
        db_session.add_all([pending, revoked, other_prefix])
        await db_session.commit()

        result = await invitation_repo.list_pending_by_prefix("abcd1234")

        assert [i.id for i in result] == [pending.id]

    async def test_get_for_tenant_is_tenant_scoped(self, invitation_repo, db_session, test_tenant):
        invitation = InvitationFactory.build(tenant_id=test_tenant.id)
        db_session.add(invitation)
        await db_session.commit()

        assert await invitation_repo.get_for_tenant(invitation.id, test_tenant.id) is invitation
        assert await invitation_repo.get_for_tenant(invitation.id, uuid4()) is None

    async def test_mark_status_refuses_to_leave_terminal_state(
        self, invitation_repo, db_session, test_tenant
    ):
        invitation = InvitationFactory.build(tenant_id=test_tenant.id)
        db_session.add(invitation)
        await db_session.commit()

        await invitation_repo.mark_status(invitation, InvitationStatus.REVOKED)

        with pytest.raises(ValueError, match="already revoked"):
            await invitation_repo.mark_status(invitation, InvitationStatus.ACCEPTED)

    async def test_mark_status_refuses_pending_target(
        self, invitation_repo, db_session, test_tenant
    ):
        invitation = InvitationFactory.build(tenant_id=test_tenant.id)
        db_session.add(invitation)
        await db_session.commit()

        with pytest.raises(ValueError, match="Cannot transition"):
            await invitation_repo.mark_status(invitation, InvitationStatus.PENDING)

    async def test_mark_status_skips_row_resolved_by_another_session(
        self, invitation_repo, db_session, read_session, test_tenant
    ):
        invitation = InvitationFactory.build(tenant_id=test_tenant.id)
        db_session.add(invitation)
        await db_session.commit()
        async with read_session() as session:
            row = await session.get(Invitation, invitation.id)
            row.status = InvitationStatus.REVOKED.value
            await session.commit()

        moved = await invitation_repo.mark_status(invitation, InvitationStatus.ACCEPTED)
        await db_session.commit()

        assert moved is False
        async with read_session() as session:
            assert (await session.get(Invitation, invitation.id)).status == "revoked"

    async def test_mark_status_requires_matching_token_hash(
        self, invitation_repo, db_session, read_session, test_tenant
    ):
        invitation = InvitationFactory.build(tenant_id=test_tenant.id)
        db_session.add(invitation)
        await db_session.commit()

        assert not await invitation_repo.mark_status(
            invitation, InvitationStatus.ACCEPTED, token_hash="stale-hash"
        )
        assert invitation.is_pending
        assert await invitation_repo.mark_status(
            invitation, InvitationStatus.ACCEPTED, token_hash=invitation.token_hash
        )
        await db_session.commit()

        assert invitation.status == "accepted"
        async with read_session() as session:
            assert (await session.get(Invitation, invitation.id)).status == "accepted"

    async def test_save_bumps_updated_at(self, invitation_repo, db_session, test_tenant):
        invitation = InvitationFactory.build(tenant_id=test_tenant.id)
        db_session.add(invitation)
        await db_session.commit()
        before = invitation.updated_at

        await invitation_repo.save(invitation)

        assert invitation.updated_at >= before

    async def test_pending_unique_index(self, db_session, test_tenant):
        db_session.add(InvitationFactory.build(email="bob@x.io", tenant_id=test_tenant.id))
        await db_session.commit()

        db_session.add(InvitationFactory.build(email="bob@x.io", tenant_id=test_tenant.id))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

    async def test_pending_unique_index_ignores_terminal_rows(self, db_session, test_tenant):
        for status in (InvitationStatus.EXPIRED, InvitationStatus.REVOKED):
            db_session.add(
                InvitationFactory.build(
                    email="bob@x.io", tenant_id=test_tenant.id, status=status.value
                )
            )
        db_session.add(InvitationFactory.build(email="bob@x.io", tenant_id=test_tenant.id))

        await db_session.commit()


class TestUserRepository:
    async def test_create_account(self, user_repo, db_session, test_tenant):
        user_id = await user_repo.create_account(
            email="bob@x.io",
            password_hash="hashed",
            role=UserRole.CREATOR,
            tenant_id=test_tenant.id,
            name="Bob",
        )
        await db_session.commit()

        user = await db_session.get(User, user_id)
        assert user.email == "bob@x.io"
        assert user.role == "creator"
        assert user.tenant_id == test_tenant.id
        assert user.is_active is True

    async def test_email_unique_across_tenants(self, user_repo, db_session, test_tenant):
        db_session.add(UserFactory.build(email="bob@x.io", tenant_id=test_tenant.id))
        await db_session.commit()

        with pytest.raises(IntegrityError):
            await user_repo.create_account(
                email="bob@x.io",
                password_hash="hashed",
                role=UserRole.GUEST,
                tenant_id=uuid4(),
            )
        await db_session.rollback()


class TestUniquenessGuards:
    async def test_email_check_passes_for_new_email(self, guards):
        await guards.check_email_globally_unique("new@x.io")

    async def test_email_check_is_cross_tenant(self, guards, db_session):
        db_session.add(UserFactory.build(email="bob@x.io", tenant_id=uuid4()))
        await db_session.commit()

        with pytest.raises(ConflictError) as exc_info:
            await guards.check_email_globally_unique("bob@x.io")

        assert exc_info.value.status_code == 409

    async def test_pending_check_only_counts_pending(self, guards, db_session, test_tenant):
        db_session.add(
            InvitationFactory.build(
                email="bob@x.io",
                tenant_id=test_tenant.id,
                status=InvitationStatus.ACCEPTED.value,
            )
        )
        await db_session.commit()

        await guards.check_no_pending_invitation("bob@x.io", test_tenant.id)

    async def test_pending_check_is_per_tenant(self, guards, db_session, test_tenant):
        db_session.add(InvitationFactory.build(email="bob@x.io", tenant_id=test_tenant.id))
        await db_session.commit()

        await guards.check_no_pending_invitation("bob@x.io", uuid4())
        with pytest.raises(ConflictError, match="pending invitation already exists"):
            await guards.check_no_pending_invitation("bob@x.io", test_tenant.id)
