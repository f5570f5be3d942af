"""PasswordResetTokenRepository protocol (port) for domain layer.

Reset tokens are short-lived and single-use, so unlike refresh tokens they
are stored in plain form and looked up directly.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass
class PasswordResetTokenData:
    """Data transfer object for a password reset token record."""

    id: UUID
    principal_id: UUID
    token: str
    expires_at: datetime
    used_at: datetime | None
    created_at: datetime

    def is_usable(self, now: datetime) -> bool:
        """Usable only while unused and strictly before expiry."""
        return self.used_at is None and now < self.expires_at


class PasswordResetTokenRepository(Protocol):
    """Protocol for password reset token persistence operations."""

    async def save(
        self,
        principal_id: UUID,
        token: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> PasswordResetTokenData:
        """Create a reset token record with ``used_at = None``."""
        ...

    async def find_by_token(self, token: str) -> PasswordResetTokenData | None:
        """Find a record by token value, used or not."""
        ...

    async def mark_used(self, token_id: UUID, used_at: datetime) -> bool:
        """Mark a record used if it is still unused.

        Must be an atomic conditional update (``WHERE used_at IS NULL``) so two
        concurrent redemptions cannot both succeed.

        Returns:
            True only for the call that flipped the record.
        """
        ...
