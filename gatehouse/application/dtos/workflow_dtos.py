"""Access workflow DTOs.

Result dataclasses returned by the admin-facing access workflow service.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class RoleDefinition:
    """Role catalog entry.

    Attributes:
        role: Normalized role key.
        description: Optional description.
        is_system: True for protected roles.
    """

    role: str
    description: str | None
    is_system: bool


@dataclass(frozen=True, kw_only=True)
class AdminNotificationResult:
    """Outcome of email verification completion.

    Attributes:
        notified: True when at least one active admin was notified.
        admin_emails: Emails of the admins that were notified.
    """

    notified: bool
    admin_emails: list[str]


@dataclass(frozen=True, kw_only=True)
class ApprovalResult:
    """Outcome of an admin approval toggle.

    Attributes:
        principal_id: Principal whose approval changed.
        approved: Approval state after the call.
        notified: True when the principal was told about a new approval.
    """

    principal_id: UUID
    approved: bool
    notified: bool


@dataclass(frozen=True, kw_only=True)
class ActiveStateResult:
    """Outcome of an active flag flip.

    Attributes:
        principal_id: Principal whose flag changed.
        active: Active flag after the call.
    """

    principal_id: UUID
    active: bool
