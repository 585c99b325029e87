"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, TenantFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.invitation import InvitationFactory
from tests.factories.tenant import TenantFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    "DEFAULT_TEST_PASSWORD",
    "BaseFactory",
    "InvitationFactory",
    "TenantFactory",
    "UserFactory",
    "generate_uuid",
    "utc_now",
]
