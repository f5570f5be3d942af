"""Unit tests for TokenIssuer.

Tests cover:
- Role normalization and ordering in claims
- Refresh token persisted as a hash with the configured expiry
- A new record per issuance
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from gatehouse.application.services import TokenIssuer, canonical_roles
from gatehouse.domain.entities import Principal


@pytest.fixture
def token_service() -> Mock:
    service = Mock()
    service.expires_in_seconds = 900
    service.generate_access_token.side_effect = lambda **kw: (
        "access-token",
        kw["issued_at"] + timedelta(minutes=15),
    )
    return service


@pytest.fixture
def refresh_repo() -> Mock:
    repo = Mock()
    repo.save = AsyncMock()
    return repo


@pytest.fixture
def issuer(token_service, hasher, refresh_repo, clock) -> TokenIssuer:
    return TokenIssuer(
        token_service=token_service,
        hasher=hasher,
        refresh_token_repo=refresh_repo,
        clock=clock,
        refresh_token_expire_days=30,
    )


@pytest.fixture
def principal() -> Principal:
    return Principal(id=uuid7(), email="coach@example.com")


@pytest.mark.unit
class TestTokenIssuer:
    async def test_roles_are_normalized_and_sorted(self, issuer, token_service, principal):
        tokens = await issuer.issue(principal, ["coach", "ADMIN"])

        assert tokens.roles == ["ADMIN", "COACH"]
        assert token_service.generate_access_token.call_args.kwargs["roles"] == [
            "ADMIN",
            "COACH",
        ]

    async def test_refresh_token_stored_as_hash(
        self, issuer, refresh_repo, hasher, clock, principal
    ):
        tokens = await issuer.issue(principal, [])

        saved = refresh_repo.save.await_args.kwargs
        assert saved["principal_id"] == principal.id
        assert saved["token_hash"] != tokens.refresh_token
        assert hasher.verify(tokens.refresh_token, saved["token_hash"])
        assert saved["expires_at"] == clock.now() + timedelta(days=30)
        assert saved["created_at"] == clock.now()
        assert tokens.refresh_token_expires_at == saved["expires_at"]

    async def test_refresh_token_has_256_bits_of_entropy(self, issuer, principal):
        tokens = await issuer.issue(principal, [])
        # token_urlsafe(32) encodes 32 bytes as 43 base64url characters
        assert len(tokens.refresh_token) >= 43

    async def test_each_issue_creates_new_record(self, issuer, refresh_repo, principal):
        first = await issuer.issue(principal, [])
        second = await issuer.issue(principal, [])

        assert first.refresh_token != second.refresh_token
        assert refresh_repo.save.await_count == 2

    async def test_access_token_lifetime_reported(self, issuer, principal):
        tokens = await issuer.issue(principal, [])
        assert tokens.access_token == "access-token"
        assert tokens.access_token_expires_in == 900


@pytest.mark.unit
def test_canonical_roles_drops_unparseable_names():
    assert canonical_roles(["coach", "1bad", "Coach", "administrator"]) == [
        "ADMIN",
        "COACH",
    ]
