"""Security adapters (hashing, token signing)."""

from gatehouse.infrastructure.security.bcrypt_credential_hasher import (
    BcryptCredentialHasher,
)
from gatehouse.infrastructure.security.jwt_service import JWTService

__all__ = ["BcryptCredentialHasher", "JWTService"]
