"""Refresh token ledger.

Stores hashed, revocable refresh token records and resolves a presented
plaintext token to its record.

Matching algorithm:
    bcrypt hashes are salted and non-deterministic, so a presented token
    cannot be hashed and looked up by value. Instead the ledger fetches a
    bounded window of the most recent unrevoked records, newest first, and
    hash-compares the token against each candidate in that order. The first
    match wins.

    The window (``scan_limit``, default 50) caps verification cost at one
    bcrypt comparison per candidate. A valid token older than the newest
    ``scan_limit`` unrevoked records is not found and behaves as invalid.

    A match whose ``expires_at`` has passed is reported exactly like no
    match, so expired-but-unrevoked rows are indistinguishable from unknown
    tokens.
"""

from uuid import UUID

from gatehouse.core.constants import REFRESH_TOKEN_SCAN_LIMIT_DEFAULT
from gatehouse.domain.protocols import (
    ClockProtocol,
    CredentialHasherProtocol,
    LoggerProtocol,
    RefreshTokenData,
    RefreshTokenRepository,
)


class RefreshTokenLedger:
    """Hashed refresh token store with bounded newest-first matching."""

    def __init__(
        self,
        refresh_token_repo: RefreshTokenRepository,
        hasher: CredentialHasherProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
        scan_limit: int = REFRESH_TOKEN_SCAN_LIMIT_DEFAULT,
    ) -> None:
        """Initialize ledger.

        Args:
            refresh_token_repo: Refresh token persistence.
            hasher: Hasher used when the tokens were stored.
            clock: Time source for expiry checks and revocation stamps.
            logger: Structured logger.
            scan_limit: Most-recent unrevoked records compared per lookup.

        Raises:
            ValueError: If scan_limit is less than 1.
        """
        if scan_limit < 1:
            raise ValueError("scan_limit must be at least 1")
        self._refresh_token_repo = refresh_token_repo
        self._hasher = hasher
        self._clock = clock
        self._logger = logger
        self._scan_limit = scan_limit

    @property
    def scan_limit(self) -> int:
        return self._scan_limit

    async def find_valid(self, presented_token: str) -> RefreshTokenData | None:
        """Find the unrevoked, unexpired record matching a presented token."""
        return await self.find_match(presented_token, include_expired=False)

    async def find_match(
        self, presented_token: str, *, include_expired: bool = False
    ) -> RefreshTokenData | None:
        """Find the unrevoked record matching a presented token.

        Args:
            presented_token: Plaintext token from the caller.
            include_expired: Return an expired match instead of None (used by
                logout, which revokes regardless of expiry).

        Returns:
            The matching record, or None.
        """
        if not presented_token:
            return None

        candidates = await self._refresh_token_repo.find_recent_unrevoked(
            self._scan_limit
        )
        for candidate in candidates[: self._scan_limit]:
            if not self._hasher.verify(presented_token, candidate.token_hash):
                continue
            if not include_expired and candidate.expires_at <= self._clock.now():
                return None
            return candidate
        return None

    async def revoke(self, token_id: UUID) -> bool:
        """Revoke a record.

        Idempotent: revoking an already revoked record changes nothing.

        Returns:
            True only for the call that revoked the record.
        """
        return await self._refresh_token_repo.revoke(token_id, self._clock.now())

    async def revoke_all(self, principal_id: UUID) -> int:
        """Revoke every outstanding record of a principal.

        Returns:
            Number of records revoked.
        """
        count = await self._refresh_token_repo.revoke_all_for_principal(
            principal_id, self._clock.now()
        )
        if count:
            self._logger.info(
                "refresh_tokens_revoked",
                principal_id=str(principal_id),
                count=count,
            )
        return count
