"""Authentication DTOs (Data Transfer Objects).

Result dataclasses returned by the identity service. These carry data back to
the host's transport layer and never include password hashes or pending
verification tokens.

DTOs:
    - PrincipalView: Safe projection of a principal and its credential state
    - IssuedTokens: Result of TokenIssuer.issue
    - AuthResult: Result of login and refresh
    - RegistrationResult: Result of register
    - PasswordResetRequested: Result of request_password_reset
    - PrincipalRoles: Result of role lookups for a principal
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from gatehouse.domain.entities import CredentialRecord, Principal


@dataclass(frozen=True, kw_only=True)
class PrincipalView:
    """Safe, serializable view of a principal.

    Attributes:
        id: Principal id.
        email: Normalized email.
        first_name: Optional display first name.
        last_name: Optional display last name.
        roles: Normalized role keys, sorted.
        email_verified_at: When the email was verified.
        phone_verified_at: When the phone was verified.
        admin_approved_at: When an admin approved the account.
        is_active: Account active flag.
    """

    id: UUID
    email: str
    first_name: str | None
    last_name: str | None
    roles: list[str]
    email_verified_at: datetime | None
    phone_verified_at: datetime | None
    admin_approved_at: datetime | None
    is_active: bool

    @classmethod
    def from_records(
        cls,
        principal: Principal,
        record: CredentialRecord,
        roles: list[str],
    ) -> "PrincipalView":
        """Build a view from the principal, its credential record and role keys."""
        return cls(
            id=principal.id,
            email=principal.email,
            first_name=principal.first_name,
            last_name=principal.last_name,
            roles=sorted(roles),
            email_verified_at=record.email_verified_at,
            phone_verified_at=record.phone_verified_at,
            admin_approved_at=record.admin_approved_at,
            is_active=record.is_active,
        )


@dataclass(frozen=True, kw_only=True)
class IssuedTokens:
    """Freshly minted token pair.

    The refresh token is the only copy of the plaintext secret; only its hash
    is persisted.

    Attributes:
        access_token: Signed access token.
        access_token_expires_in: Access token lifetime in seconds.
        refresh_token: Opaque refresh token (plaintext, returned once).
        refresh_token_expires_at: Refresh token expiry.
        roles: Role keys embedded in the access token (sorted).
    """

    access_token: str
    access_token_expires_in: int
    refresh_token: str
    refresh_token_expires_at: datetime
    roles: list[str]


@dataclass(frozen=True, kw_only=True)
class AuthResult:
    """Response from successful login or refresh.

    Attributes:
        access_token: Signed access token (short-lived).
        access_token_expires_in: Access token lifetime in seconds.
        refresh_token: Opaque refresh token (long-lived).
        refresh_token_expires_at: Refresh token expiry.
        user: Safe view of the authenticated principal.
        token_type: Token type (always "bearer").
    """

    access_token: str
    access_token_expires_in: int
    refresh_token: str
    refresh_token_expires_at: datetime
    user: PrincipalView
    token_type: str = "bearer"

    @classmethod
    def from_tokens(cls, tokens: IssuedTokens, user: PrincipalView) -> "AuthResult":
        """Combine an issued token pair with the principal view."""
        return cls(
            access_token=tokens.access_token,
            access_token_expires_in=tokens.access_token_expires_in,
            refresh_token=tokens.refresh_token,
            refresh_token_expires_at=tokens.refresh_token_expires_at,
            user=user,
        )


@dataclass(frozen=True, kw_only=True)
class RegistrationResult:
    """Response from successful registration.

    Attributes:
        user: Safe view of the registered principal.
        debug_token: Verification token, only when debug tokens are exposed.
    """

    user: PrincipalView
    debug_token: str | None = None


@dataclass(frozen=True, kw_only=True)
class PasswordResetRequested:
    """Response from a password reset request.

    Identical in shape whether or not the email matched a principal.

    Attributes:
        debug_token: Reset token, only when debug tokens are exposed and a
            principal matched.
    """

    debug_token: str | None = None


@dataclass(frozen=True, kw_only=True)
class PrincipalRoles:
    """Role keys held by a principal.

    Attributes:
        principal_id: Principal id.
        roles: Normalized role keys, sorted.
    """

    principal_id: UUID
    roles: list[str]
