"""Token issuer service.

Mints a signed access token and a brand-new opaque refresh token for a
principal. The refresh token secret is returned to the caller exactly once;
only its bcrypt hash is persisted.

Token Format:
    - Access token: JWT carrying sub, email, roles (sorted), iat, exp, jti
    - Refresh token: urlsafe-base64 of 32 random bytes (256 bits)
"""

import secrets
from collections.abc import Iterable
from datetime import timedelta

from gatehouse.application.dtos import IssuedTokens
from gatehouse.core.constants import TOKEN_BYTES
from gatehouse.core.errors import AuthenticationError
from gatehouse.core.result import Result
from gatehouse.domain.entities import Principal
from gatehouse.domain.protocols import (
    AccessTokenClaims,
    ClockProtocol,
    CredentialHasherProtocol,
    RefreshTokenRepository,
    TokenGenerationProtocol,
)
from gatehouse.domain.value_objects import normalize_role_name


def canonical_roles(roles: Iterable[str]) -> list[str]:
    """Normalize, de-duplicate and sort role keys for token claims.

    Unparseable role names are dropped.

    Example:
        >>> canonical_roles(["coach", "ADMIN", "Coach"])
        ['ADMIN', 'COACH']
    """
    keys: set[str] = set()
    for role in roles:
        try:
            keys.add(normalize_role_name(role))
        except ValueError:
            continue
    return sorted(keys)


class TokenIssuer:
    """Issues access/refresh token pairs.

    Issuance always creates a new refresh token record; it never updates an
    existing one.
    """

    def __init__(
        self,
        token_service: TokenGenerationProtocol,
        hasher: CredentialHasherProtocol,
        refresh_token_repo: RefreshTokenRepository,
        clock: ClockProtocol,
        refresh_token_expire_days: int = 30,
    ) -> None:
        """Initialize token issuer.

        Args:
            token_service: Signed access token generator/validator.
            hasher: Hasher applied to the refresh token secret.
            refresh_token_repo: Refresh token persistence.
            clock: Time source for issue and expiry timestamps.
            refresh_token_expire_days: Refresh token lifetime in days.
        """
        self._token_service = token_service
        self._hasher = hasher
        self._refresh_token_repo = refresh_token_repo
        self._clock = clock
        self._refresh_ttl = timedelta(days=refresh_token_expire_days)

    async def issue(self, principal: Principal, roles: Iterable[str]) -> IssuedTokens:
        """Issue a token pair for a principal.

        Args:
            principal: Token subject.
            roles: Role keys to embed; normalized and sorted before signing.

        Returns:
            IssuedTokens with the plaintext refresh token.
        """
        now = self._clock.now()
        claim_roles = canonical_roles(roles)

        access_token, _ = self._token_service.generate_access_token(
            principal_id=principal.id,
            email=principal.email,
            roles=claim_roles,
            issued_at=now,
        )

        refresh_token = secrets.token_urlsafe(TOKEN_BYTES)
        refresh_expires_at = now + self._refresh_ttl
        await self._refresh_token_repo.save(
            principal_id=principal.id,
            token_hash=self._hasher.hash(refresh_token),
            expires_at=refresh_expires_at,
            created_at=now,
        )

        return IssuedTokens(
            access_token=access_token,
            access_token_expires_in=self._token_service.expires_in_seconds,
            refresh_token=refresh_token,
            refresh_token_expires_at=refresh_expires_at,
            roles=claim_roles,
        )

    def verify_access_token(
        self, token: str
    ) -> Result[AccessTokenClaims, AuthenticationError]:
        """Validate a signed access token and decode its claims."""
        return self._token_service.validate_access_token(token)
