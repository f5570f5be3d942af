"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance.

Usage:
    from gatehouse.domain.protocols import CredentialHasherProtocol, RefreshTokenRepository
"""

# Service protocols
from gatehouse.domain.protocols.clock_protocol import ClockProtocol
from gatehouse.domain.protocols.logger_protocol import LoggerProtocol
from gatehouse.domain.protocols.notifier_protocol import NotifierProtocol
from gatehouse.domain.protocols.password_hashing_protocol import (
    CredentialHasherProtocol,
)
from gatehouse.domain.protocols.token_generation_protocol import (
    AccessTokenClaims,
    TokenGenerationProtocol,
)

# Repository protocols
from gatehouse.domain.protocols.credential_repository import CredentialRepository
from gatehouse.domain.protocols.password_reset_token_repository import (
    PasswordResetTokenData,
    PasswordResetTokenRepository,
)
from gatehouse.domain.protocols.principal_repository import PrincipalRepository
from gatehouse.domain.protocols.refresh_token_repository import (
    RefreshTokenData,
    RefreshTokenRepository,
)
from gatehouse.domain.protocols.role_repository import (
    RoleAssignmentRepository,
    RoleRepository,
)

__all__ = [
    # Service protocols
    "AccessTokenClaims",
    "ClockProtocol",
    "CredentialHasherProtocol",
    "LoggerProtocol",
    "NotifierProtocol",
    "TokenGenerationProtocol",
    # Repository protocols
    "CredentialRepository",
    "PasswordResetTokenData",
    "PasswordResetTokenRepository",
    "PrincipalRepository",
    "RefreshTokenData",
    "RefreshTokenRepository",
    "RoleAssignmentRepository",
    "RoleRepository",
]
