"""JWT token service (adapter).

Implements TokenGenerationProtocol using PyJWT.

Security:
    - HMAC-SHA256 (HS256) by default
    - 256-bit secret key minimum
    - Unique JWT ID (jti) per token

Claims:
    sub (principal id), email, roles (sorted role keys), iat, exp, jti
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError
from uuid_extensions import uuid7

from gatehouse.core.enums import ErrorCode
from gatehouse.core.errors import AuthenticationError
from gatehouse.core.result import Failure, Result, Success
from gatehouse.domain.protocols import AccessTokenClaims

_REQUIRED_CLAIMS = ["sub", "email", "roles", "iat", "exp", "jti"]


def _invalid_access_token() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_ACCESS_TOKEN,
        message="Invalid access token",
    )


class JWTService:
    """Access token generation and validation service.

    Usage:
        service = JWTService(secret_key=settings.jwt_secret)
        token, expires_at = service.generate_access_token(
            principal_id=principal.id,
            email=principal.email,
            roles=["ADMIN"],
            issued_at=clock.now(),
        )
        result = service.validate_access_token(token)
    """

    def __init__(
        self,
        secret_key: str,
        expiration_minutes: int = 15,
        algorithm: str = "HS256",
    ) -> None:
        """Initialize JWT service.

        Args:
            secret_key: Signing secret; MUST be at least 32 bytes.
            expiration_minutes: Token lifetime in minutes (default: 15).
            algorithm: PyJWT signing algorithm (default: HS256).

        Raises:
            ValueError: If secret_key is too short or the lifetime is not positive.
        """
        if len(secret_key) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)
        if expiration_minutes < 1:
            msg = "Access token lifetime must be at least 1 minute"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expiration = timedelta(minutes=expiration_minutes)
        self._algorithm = algorithm

    @property
    def expires_in_seconds(self) -> int:
        return int(self._expiration.total_seconds())

    def generate_access_token(
        self,
        principal_id: UUID,
        email: str,
        roles: list[str],
        issued_at: datetime,
    ) -> tuple[str, datetime]:
        """Generate a signed access token.

        Returns:
            Tuple of (token, expires_at).
        """
        expires_at = issued_at + self._expiration
        payload = {
            "sub": str(principal_id),
            "email": email,
            "roles": list(roles),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": str(uuid7()),
        }
        token: str = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return token, expires_at

    def validate_access_token(
        self, token: str
    ) -> Result[AccessTokenClaims, AuthenticationError]:
        """Validate signature and expiry and decode the claims.

        PyJWT validates the signature and the ``exp`` claim against the
        current wall clock.

        Returns:
            Success(AccessTokenClaims) or Failure with ``INVALID_ACCESS_TOKEN``.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
            roles = payload["roles"]
            if not isinstance(roles, list):
                return Failure(error=_invalid_access_token())
            claims = AccessTokenClaims(
                subject=UUID(payload["sub"]),
                email=str(payload["email"]),
                roles=[str(role) for role in roles],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
                token_id=str(payload["jti"]),
            )
        except (InvalidTokenError, ValueError, TypeError):
            # Invalid, expired or malformed token
            return Failure(error=_invalid_access_token())
        return Success(value=claims)
