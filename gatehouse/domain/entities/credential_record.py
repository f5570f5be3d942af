"""Credential record domain entity.

Engine-owned authentication state attached one-to-one to a Principal.
Absence of a record means the principal cannot authenticate.

State machine per principal:
    Unregistered -> Registered (unverified) -> Verified -> Approved
with an orthogonal Active/Inactive flag.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from gatehouse.domain.policies.access_gate import PrincipalState


@dataclass
class CredentialRecord:
    """Authentication side-table row for a Principal.

    Attributes:
        principal_id: Owning principal (unique).
        password_hash: bcrypt hash of the password (never plaintext).
        created_at: When the record was created (registration).
        email_verified_at: When the email was verified (None until then).
        email_verification_token: Pending verification token (unique, nullable).
        phone_verified_at: When the phone was verified (None until then).
        admin_approved_at: When an admin approved the account.
        is_active: Account active flag (default True).
    """

    principal_id: UUID
    password_hash: str
    created_at: datetime
    email_verified_at: datetime | None = None
    email_verification_token: str | None = None
    phone_verified_at: datetime | None = None
    admin_approved_at: datetime | None = None
    is_active: bool = True

    def access_state(self) -> PrincipalState:
        """Project the flags the access gate reads."""
        return PrincipalState(
            is_active=self.is_active,
            email_verified_at=self.email_verified_at,
            phone_verified_at=self.phone_verified_at,
            admin_approved_at=self.admin_approved_at,
        )

    def mark_email_verified(self, at: datetime) -> None:
        """Record email verification and clear the pending token.

        An already verified record keeps its original timestamp.
        """
        self.email_verified_at = self.email_verified_at or at
        self.email_verification_token = None

    def set_admin_approval(self, approved: bool, at: datetime) -> bool:
        """Set or clear admin approval.

        Re-approving an approved record keeps the original timestamp.

        Returns:
            True when this call moved the record from unapproved to approved.
        """
        if not approved:
            self.admin_approved_at = None
            return False
        if self.admin_approved_at is not None:
            return False
        self.admin_approved_at = at
        return True
