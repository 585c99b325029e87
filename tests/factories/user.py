"""User factory for test data generation."""

from polyfactory import Use

from src.tenant_invites.core.security import hash_password
from src.tenant_invites.models import User, UserRole
from tests.factories.base import BaseFactory, generate_uuid, utc_now

# Default test password - stored for convenience in tests
DEFAULT_TEST_PASSWORD = "testpassword123"


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{generate_uuid().hex[-8:]}@example.com")
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    name = "Test User"
    role = UserRole.CREATOR.value
    tenant_id = None  # Required FK - must be set explicitly
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)
