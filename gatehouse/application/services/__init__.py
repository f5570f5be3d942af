"""Application services.

IdentityService and AccessWorkflowService are the public surface; the
registry, issuer, ledger and reset workflow are their collaborators.
"""

from gatehouse.application.services.access_workflow_service import (
    AccessWorkflowService,
)
from gatehouse.application.services.identity_service import IdentityService
from gatehouse.application.services.password_reset_workflow import (
    PasswordResetWorkflow,
)
from gatehouse.application.services.refresh_token_ledger import RefreshTokenLedger
from gatehouse.application.services.role_registry import RoleRegistry
from gatehouse.application.services.token_issuer import TokenIssuer, canonical_roles

__all__ = [
    "AccessWorkflowService",
    "IdentityService",
    "PasswordResetWorkflow",
    "RefreshTokenLedger",
    "RoleRegistry",
    "TokenIssuer",
    "canonical_roles",
]
