"""Access workflow service.

Admin-facing mutations of principal access state: email verification
completion, admin approval, the active flag, the role catalog and
per-principal role sets.

The caller of these operations is already privileged (see ``require_admin``),
so an unknown principal is reported plainly as ``PRINCIPAL_NOT_FOUND``.

Notifications:
    - Email verification completion notifies every active ADMIN, only when
      at least one exists
    - Approval notifies the principal only on an unapproved -> approved
      transition, never on revocation
"""

from collections.abc import Iterable
from uuid import UUID

from gatehouse.application.dtos import (
    ActiveStateResult,
    AdminNotificationResult,
    ApprovalResult,
    PrincipalRoles,
    RoleDefinition,
)
from gatehouse.application.services.notification_guard import notify_safely
from gatehouse.application.services.role_registry import RoleRegistry
from gatehouse.core.constants import ADMIN_ROLE
from gatehouse.core.enums import ErrorCode
from gatehouse.core.errors import (
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from gatehouse.core.result import Failure, Result, Success
from gatehouse.domain.entities import Principal, Role
from gatehouse.domain.protocols import (
    ClockProtocol,
    CredentialRepository,
    LoggerProtocol,
    NotifierProtocol,
    PrincipalRepository,
)
from gatehouse.domain.value_objects import is_admin


def _principal_not_found(principal_id: UUID) -> NotFoundError:
    return NotFoundError(
        code=ErrorCode.PRINCIPAL_NOT_FOUND,
        message="Principal not found",
        resource_type="Principal",
        resource_id=str(principal_id),
    )


def _to_definition(role: Role) -> RoleDefinition:
    return RoleDefinition(
        role=role.key,
        description=role.description,
        is_system=role.is_system,
    )


class AccessWorkflowService:
    """Admin-facing access state and role management.

    Dependencies (injected via constructor):
        - PrincipalRepository: Principal lookups and the admin roster
        - CredentialRepository: Verification/approval/active flags
        - RoleRegistry: Role catalog and assignments
        - NotifierProtocol: Admin and approval notifications
        - ClockProtocol, LoggerProtocol
    """

    def __init__(
        self,
        principal_repo: PrincipalRepository,
        credential_repo: CredentialRepository,
        role_registry: RoleRegistry,
        notifier: NotifierProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._principal_repo = principal_repo
        self._credential_repo = credential_repo
        self._roles = role_registry
        self._notifier = notifier
        self._clock = clock
        self._logger = logger

    # =========================================================================
    # Account state
    # =========================================================================

    async def mark_email_verified_and_notify_admins(
        self, principal_id: UUID
    ) -> Result[AdminNotificationResult, NotFoundError]:
        """Mark a principal's email verified and tell the active admins.

        An already verified principal keeps its original timestamp.

        Returns:
            Success(AdminNotificationResult) reporting whether any admin was
            notified, or Failure(NotFoundError).
        """
        loaded = await self._load(principal_id)
        if isinstance(loaded, Failure):
            return loaded
        principal = loaded.value

        await self._credential_repo.mark_email_verified(principal_id, self._clock.now())
        self._logger.info("email_verified", principal_id=str(principal_id))

        admin_emails = await self.list_admin_emails()
        if not admin_emails:
            self._logger.info("admin_notification_skipped", reason="no_active_admins")
            return Success(value=AdminNotificationResult(notified=False, admin_emails=[]))

        notified = await notify_safely(
            self._logger,
            "admins_account_verified",
            lambda: self._notifier.send_admins_account_verified(admin_emails, principal),
            principal_id=str(principal_id),
            recipients=len(admin_emails),
        )
        return Success(
            value=AdminNotificationResult(notified=notified, admin_emails=admin_emails)
        )

    async def set_admin_approval(
        self, principal_id: UUID, approved: bool
    ) -> Result[ApprovalResult, NotFoundError]:
        """Set or clear admin approval.

        Returns:
            Success(ApprovalResult) or Failure(NotFoundError).
        """
        loaded = await self._load(principal_id)
        if isinstance(loaded, Failure):
            return loaded
        principal = loaded.value

        # Conditional: only the call that flips unapproved -> approved sees True
        newly_approved = await self._credential_repo.set_admin_approval(
            principal_id, approved, self._clock.now()
        )
        self._logger.info(
            "admin_approval_set", principal_id=str(principal_id), approved=approved
        )

        notified = False
        if newly_approved:
            notified = await notify_safely(
                self._logger,
                "account_approved",
                lambda: self._notifier.send_account_approved(
                    principal.email, principal.first_name
                ),
                principal_id=str(principal_id),
            )
        return Success(
            value=ApprovalResult(
                principal_id=principal_id, approved=approved, notified=notified
            )
        )

    async def set_active(
        self, principal_id: UUID, active: bool
    ) -> Result[ActiveStateResult, NotFoundError]:
        """Flip the active flag (unconditional and idempotent)."""
        loaded = await self._load(principal_id)
        if isinstance(loaded, Failure):
            return loaded

        await self._credential_repo.set_active(principal_id, active)
        self._logger.info("active_state_set", principal_id=str(principal_id), active=active)
        return Success(value=ActiveStateResult(principal_id=principal_id, active=active))

    async def list_admin_emails(self) -> list[str]:
        """Return the emails of every active ADMIN, sorted and unique."""
        admins = await self._principal_repo.find_active_with_role(ADMIN_ROLE)
        return sorted({admin.email for admin in admins})

    def require_admin(self, roles: Iterable[str]) -> Result[None, AuthorizationError]:
        """Admin guard for a caller's role claims.

        Returns:
            Success(None) when the roles grant ADMIN, otherwise
            Failure(AuthorizationError) with ``PERMISSION_DENIED``.
        """
        if is_admin(roles):
            return Success(value=None)
        return Failure(
            error=AuthorizationError(
                code=ErrorCode.PERMISSION_DENIED,
                message="Admin role required",
                required_role=ADMIN_ROLE,
            )
        )

    # =========================================================================
    # Role catalog
    # =========================================================================

    async def list_roles(self) -> Result[list[RoleDefinition], DomainError]:
        """Return the role catalog ordered by key."""
        roles = await self._roles.list_catalog()
        return Success(value=[_to_definition(role) for role in roles])

    async def create_role(
        self, name: str, description: str | None = None
    ) -> Result[RoleDefinition, ValidationError]:
        """Create a role, or update the description of an existing one."""
        result = await self._roles.create_or_update(name, description)
        if isinstance(result, Failure):
            return result
        return Success(value=_to_definition(result.value))

    async def remove_role(self, name: str) -> Result[bool, ValidationError]:
        """Remove a non-system role.

        Returns:
            Success(False) for ADMIN, system roles and unknown roles.
        """
        return await self._roles.remove(name)

    # =========================================================================
    # Principal roles
    # =========================================================================

    async def get_principal_roles(
        self, principal_id: UUID
    ) -> Result[PrincipalRoles, NotFoundError]:
        """Return a principal's role keys."""
        if await self._principal_repo.find_by_id(principal_id) is None:
            return Failure(error=_principal_not_found(principal_id))
        roles = await self._roles.role_keys_for(principal_id)
        return Success(value=PrincipalRoles(principal_id=principal_id, roles=roles))

    async def set_principal_roles(
        self, principal_id: UUID, roles: Iterable[str]
    ) -> Result[PrincipalRoles, DomainError]:
        """Replace a principal's role set.

        Role names are normalized and de-duplicated; missing roles are created.

        Returns:
            Success(PrincipalRoles) or Failure with ``PRINCIPAL_NOT_FOUND``
            or ``INVALID_ROLE_NAME``.
        """
        if await self._principal_repo.find_by_id(principal_id) is None:
            return Failure(error=_principal_not_found(principal_id))
        return await self._replace(principal_id, roles)

    async def assign_role_to_principal(
        self, principal_id: UUID, role: str
    ) -> Result[PrincipalRoles, DomainError]:
        """Add one role to a principal's set."""
        if await self._principal_repo.find_by_id(principal_id) is None:
            return Failure(error=_principal_not_found(principal_id))
        current = await self._roles.role_keys_for(principal_id)
        return await self._replace(principal_id, [*current, role])

    async def remove_role_from_principal(
        self, principal_id: UUID, role: str
    ) -> Result[PrincipalRoles, DomainError]:
        """Remove one role from a principal's set (no-op if not held)."""
        if await self._principal_repo.find_by_id(principal_id) is None:
            return Failure(error=_principal_not_found(principal_id))

        key_result = self._roles.normalize(role)
        if isinstance(key_result, Failure):
            return key_result
        current = await self._roles.role_keys_for(principal_id)
        remaining = [key for key in current if key != key_result.value.value]
        return await self._replace(principal_id, remaining)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _load(
        self, principal_id: UUID
    ) -> Result[Principal, NotFoundError]:
        principal = await self._principal_repo.find_by_id(principal_id)
        if principal is None:
            return Failure(error=_principal_not_found(principal_id))
        if await self._credential_repo.find_by_principal_id(principal_id) is None:
            return Failure(error=_principal_not_found(principal_id))
        return Success(value=principal)

    async def _replace(
        self, principal_id: UUID, roles: Iterable[str]
    ) -> Result[PrincipalRoles, DomainError]:
        keys_result = self._roles.normalize_all(roles)
        if isinstance(keys_result, Failure):
            return keys_result
        assigned = await self._roles.replace_assignments(principal_id, keys_result.value)
        self._logger.info(
            "principal_roles_set", principal_id=str(principal_id), roles=assigned
        )
        return Success(value=PrincipalRoles(principal_id=principal_id, roles=assigned))
