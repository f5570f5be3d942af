"""RefreshTokenRepository protocol (port) for domain layer.

Refresh tokens are stored as non-deterministic hashes, so the store cannot
look a presented token up by value. It instead serves a bounded, newest-first
window of unrevoked rows for the ledger to hash-compare.

Token Lifecycle:
    1. Created at every successful login/refresh (never updated in place)
    2. Matched by hash comparison during refresh/logout
    3. Revoked exactly once (rotation, logout, password change)
    4. Never deleted by the engine: expiry and revocation are logical
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass
class RefreshTokenData:
    """Data transfer object for a refresh token record.

    The plaintext token is never part of this record.
    """

    id: UUID
    principal_id: UUID
    token_hash: str
    expires_at: datetime
    revoked_at: datetime | None
    created_at: datetime


class RefreshTokenRepository(Protocol):
    """Protocol for refresh token persistence operations."""

    async def save(
        self,
        principal_id: UUID,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> RefreshTokenData:
        """Create a new refresh token record with ``revoked_at = None``."""
        ...

    async def find_recent_unrevoked(self, limit: int) -> list[RefreshTokenData]:
        """Return at most ``limit`` unrevoked records, newest first.

        Does NOT filter on expiry; the caller checks ``expires_at``.
        """
        ...

    async def revoke(self, token_id: UUID, revoked_at: datetime) -> bool:
        """Revoke a record if it is still unrevoked.

        Must be an atomic conditional update (``WHERE revoked_at IS NULL``).

        Returns:
            True only for the call that flipped the record, False if it was
            already revoked or does not exist.
        """
        ...

    async def revoke_all_for_principal(
        self, principal_id: UUID, revoked_at: datetime
    ) -> int:
        """Revoke every unrevoked record of a principal.

        Returns:
            Number of records revoked by this call.
        """
        ...
