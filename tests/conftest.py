"""Pytest configuration and shared fixtures.

Fixtures wire the engine the way a host would, over the in-memory store:
- A frozen, manually advanced clock
- A fast fake hasher (integration tests opt into real bcrypt)
- Mock logger and AsyncMock notifier for asserting side effects
"""

from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from gatehouse.core.config import GatehouseSettings
from gatehouse.core.container import Services, build_services
from gatehouse.domain.entities import CredentialRecord, Principal
from gatehouse.infrastructure.persistence import InMemoryStore
from tests.utils.fakes import STRONG_PASSWORD, FakeHasher, FrozenClock

TEST_JWT_SECRET = "test-secret-key-with-at-least-32-characters"


@pytest.fixture
def settings() -> GatehouseSettings:
    """Engine settings with the default access gate and cheap bcrypt."""
    return GatehouseSettings(jwt_secret=TEST_JWT_SECRET, bcrypt_rounds=4)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def hasher() -> FakeHasher:
    return FakeHasher()


@pytest.fixture
def logger() -> Mock:
    """Mock logger; ``bind`` returns the same mock so calls stay observable."""
    mock_logger = Mock()
    mock_logger.bind.return_value = mock_logger
    return mock_logger


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def services(store, notifier, settings, clock, logger, hasher) -> Services:
    return build_services(
        store,
        notifier,
        settings,
        clock=clock,
        logger=logger,
        hasher=hasher,
        expose_debug_tokens=True,
    )


@pytest.fixture
def seed_principal(store, hasher, clock):
    """Factory creating a principal with a credential record in the store.

    Defaults describe a fully verified, approved, active account.
    """

    async def _seed(
        email: str = "member@example.com",
        password: str = STRONG_PASSWORD,
        *,
        verified: bool = True,
        approved: bool = True,
        active: bool = True,
        first_name: str | None = None,
    ) -> Principal:
        principal = Principal(id=uuid7(), email=email, first_name=first_name)
        await store.principals.save(principal)
        await store.credentials.save(
            CredentialRecord(
                principal_id=principal.id,
                password_hash=hasher.hash(password),
                created_at=clock.now(),
                email_verified_at=clock.now() if verified else None,
                admin_approved_at=clock.now() if approved else None,
                is_active=active,
            )
        )
        return principal

    return _seed
