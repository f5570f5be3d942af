"""Application DTOs."""

from gatehouse.application.dtos.auth_dtos import (
    AuthResult,
    IssuedTokens,
    PasswordResetRequested,
    PrincipalRoles,
    PrincipalView,
    RegistrationResult,
)
from gatehouse.application.dtos.workflow_dtos import (
    ActiveStateResult,
    AdminNotificationResult,
    ApprovalResult,
    RoleDefinition,
)

__all__ = [
    # Auth DTOs
    "AuthResult",
    "IssuedTokens",
    "PasswordResetRequested",
    "PrincipalRoles",
    "PrincipalView",
    "RegistrationResult",
    # Workflow DTOs
    "ActiveStateResult",
    "AdminNotificationResult",
    "ApprovalResult",
    "RoleDefinition",
]
