"""Unit tests for RefreshTokenLedger matching.

Tests cover:
- Newest-first hash comparison, first match wins
- The scan window bound
- Expired match treated as no match (and included for logout)
- Revocation pass-through
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from gatehouse.application.services import RefreshTokenLedger
from gatehouse.domain.protocols import RefreshTokenData
from tests.utils.fakes import FakeHasher, FrozenClock


def make_token(hasher: FakeHasher, clock: FrozenClock, secret: str, *, ttl_days: int = 30):
    return RefreshTokenData(
        id=uuid7(),
        principal_id=uuid7(),
        token_hash=hasher.hash(secret),
        expires_at=clock.now() + timedelta(days=ttl_days),
        revoked_at=None,
        created_at=clock.now(),
    )


@pytest.fixture
def repo() -> Mock:
    mock_repo = Mock()
    mock_repo.find_recent_unrevoked = AsyncMock(return_value=[])
    mock_repo.revoke = AsyncMock(return_value=True)
    mock_repo.revoke_all_for_principal = AsyncMock(return_value=0)
    return mock_repo


@pytest.fixture
def ledger(repo, hasher, clock, logger) -> RefreshTokenLedger:
    return RefreshTokenLedger(
        refresh_token_repo=repo,
        hasher=hasher,
        clock=clock,
        logger=logger,
        scan_limit=3,
    )


@pytest.mark.unit
class TestFindValid:
    async def test_returns_matching_record(self, ledger, repo, hasher, clock):
        wanted = make_token(hasher, clock, "secret-b")
        repo.find_recent_unrevoked.return_value = [
            make_token(hasher, clock, "secret-a"),
            wanted,
        ]

        assert await ledger.find_valid("secret-b") == wanted
        repo.find_recent_unrevoked.assert_awaited_once_with(3)

    async def test_stops_at_first_match_in_order(self, ledger, repo, hasher, clock):
        first = make_token(hasher, clock, "same")
        repo.find_recent_unrevoked.return_value = [
            first,
            make_token(hasher, clock, "same"),
        ]

        assert await ledger.find_valid("same") is first
        assert hasher.verify_calls == 1

    async def test_no_match_returns_none(self, ledger, repo, hasher, clock):
        repo.find_recent_unrevoked.return_value = [make_token(hasher, clock, "other")]

        assert await ledger.find_valid("secret") is None

    async def test_never_compares_more_than_scan_limit(self, ledger, repo, hasher, clock):
        """A store returning too many rows is still cut at the window."""
        candidates = [make_token(hasher, clock, f"s{i}") for i in range(5)]
        repo.find_recent_unrevoked.return_value = candidates

        assert await ledger.find_valid("s4") is None
        assert hasher.verify_calls == 3

    async def test_empty_token_skips_lookup(self, ledger, repo):
        assert await ledger.find_valid("") is None
        repo.find_recent_unrevoked.assert_not_awaited()

    async def test_expired_match_is_reported_as_no_match(self, ledger, repo, hasher, clock):
        token = make_token(hasher, clock, "secret", ttl_days=1)
        repo.find_recent_unrevoked.return_value = [token]
        clock.advance(days=1)

        assert await ledger.find_valid("secret") is None

    async def test_include_expired_returns_expired_match(self, ledger, repo, hasher, clock):
        token = make_token(hasher, clock, "secret", ttl_days=1)
        repo.find_recent_unrevoked.return_value = [token]
        clock.advance(days=2)

        assert await ledger.find_match("secret", include_expired=True) is token


@pytest.mark.unit
class TestRevocation:
    async def test_revoke_stamps_clock_time(self, ledger, repo, clock):
        token_id = uuid7()

        assert await ledger.revoke(token_id) is True
        repo.revoke.assert_awaited_once_with(token_id, clock.now())

    async def test_revoke_reports_losing_call(self, ledger, repo):
        repo.revoke.return_value = False
        assert await ledger.revoke(uuid7()) is False

    async def test_revoke_all_logs_count(self, ledger, repo, logger):
        repo.revoke_all_for_principal.return_value = 2
        principal_id = uuid7()

        assert await ledger.revoke_all(principal_id) == 2
        logger.info.assert_called_once_with(
            "refresh_tokens_revoked", principal_id=str(principal_id), count=2
        )


@pytest.mark.unit
def test_scan_limit_must_be_positive(repo, hasher, clock, logger):
    with pytest.raises(ValueError, match="scan_limit"):
        RefreshTokenLedger(repo, hasher, clock, logger, scan_limit=0)
