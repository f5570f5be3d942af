"""CredentialRepository protocol (port).

Exactly one credential record exists per principal. Implementations must
keep ``email_verification_token`` unique among pending tokens.

Mutations are field-targeted: each one touches only the columns it names and
must be a single atomic statement per record, so concurrent flows never
overwrite each other's fields with stale reads.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from gatehouse.domain.entities import CredentialRecord


class CredentialRepository(Protocol):
    """Protocol for credential record persistence."""

    async def find_by_principal_id(self, principal_id: UUID) -> CredentialRecord | None:
        """Find the credential record owned by a principal."""
        ...

    async def find_by_verification_token(self, token: str) -> CredentialRecord | None:
        """Find the record currently holding a pending verification token."""
        ...

    async def save(self, record: CredentialRecord) -> bool:
        """Create a credential record.

        Returns:
            False if the principal already has a record (nothing written).
        """
        ...

    async def update_password_hash(self, principal_id: UUID, password_hash: str) -> bool:
        """Replace the password hash. Returns False if no record exists."""
        ...

    async def set_active(self, principal_id: UUID, active: bool) -> bool:
        """Set the active flag. Returns False if no record exists."""
        ...

    async def set_admin_approval(
        self, principal_id: UUID, approved: bool, at: datetime
    ) -> bool:
        """Set or clear admin approval.

        Approving an approved record keeps its original timestamp
        (``SET admin_approved_at = :at WHERE admin_approved_at IS NULL``).

        Returns:
            True only for the call that moved the record from unapproved to
            approved.
        """
        ...

    async def mark_email_verified(self, principal_id: UUID, at: datetime) -> bool:
        """Mark the email verified and clear any pending token.

        An existing verification timestamp is kept. Returns False if no
        record exists.
        """
        ...

    async def consume_verification_token(self, token: str, at: datetime) -> UUID | None:
        """Verify the email of whichever record holds ``token``.

        Conditional on the token still being pending, so only one caller can
        consume it.

        Returns:
            The owning principal id, or None if no record holds the token.
        """
        ...
