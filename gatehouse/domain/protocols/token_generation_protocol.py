"""Access token generation protocol for domain layer.

Access tokens are short-lived signed credentials carrying the subject id,
email and roles. Refresh tokens are opaque and handled by the ledger, not by
this port.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from gatehouse.core.errors import AuthenticationError
from gatehouse.core.result import Result


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessTokenClaims:
    """Decoded, validated access token claims."""

    subject: UUID
    email: str
    roles: list[str]
    issued_at: datetime
    expires_at: datetime
    token_id: str


class TokenGenerationProtocol(Protocol):
    """Signed access token generation and validation interface.

    Implementations:
        - JWTService: PyJWT with HMAC-SHA256
    """

    @property
    def expires_in_seconds(self) -> int:
        """Configured access token lifetime in seconds."""
        ...

    def generate_access_token(
        self,
        principal_id: UUID,
        email: str,
        roles: list[str],
        issued_at: datetime,
    ) -> tuple[str, datetime]:
        """Generate a signed access token.

        Args:
            principal_id: Subject of the token ('sub' claim).
            email: Principal's email.
            roles: Normalized, sorted role keys.
            issued_at: Issue timestamp read from the engine clock.

        Returns:
            Tuple of (token, expires_at).
        """
        ...

    def validate_access_token(
        self, token: str
    ) -> Result[AccessTokenClaims, AuthenticationError]:
        """Validate signature and expiry and decode the claims.

        Returns:
            Success(AccessTokenClaims) or Failure(AuthenticationError).
        """
        ...
