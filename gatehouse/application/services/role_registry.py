"""Role registry service.

Maps role names to role identities: normalization, the role catalog, the
protected-role policy and per-principal assignment sets.

Protected-role policy:
    ADMIN always exists, is flagged ``is_system`` and can never be removed.
    Roles referenced by an assignment are created on demand (non-system
    unless the key is ADMIN).

Usage:
    registry = RoleRegistry(role_repo=store.roles, assignment_repo=store.role_assignments,
                            clock=clock, logger=logger)
    result = registry.normalize("team lead")  # Success(RoleKey("TEAM_LEAD"))
"""

from collections.abc import Iterable
from uuid import UUID

from uuid_extensions import uuid7

from gatehouse.core.constants import ADMIN_ROLE
from gatehouse.core.enums import ErrorCode
from gatehouse.core.errors import ValidationError
from gatehouse.core.result import Failure, Result, Success
from gatehouse.domain.entities import Role
from gatehouse.domain.protocols import (
    ClockProtocol,
    LoggerProtocol,
    RoleAssignmentRepository,
    RoleRepository,
)
from gatehouse.domain.value_objects import RoleKey


def _invalid_role_name() -> ValidationError:
    return ValidationError(
        code=ErrorCode.INVALID_ROLE_NAME,
        message="Invalid role name",
        field="role",
    )


class RoleRegistry:
    """Role catalog and assignment management.

    Dependencies (injected via constructor):
        - RoleRepository: Role catalog rows
        - RoleAssignmentRepository: Principal-role join rows
        - ClockProtocol: Creation timestamps
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        role_repo: RoleRepository,
        assignment_repo: RoleAssignmentRepository,
        clock: ClockProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._role_repo = role_repo
        self._assignment_repo = assignment_repo
        self._clock = clock
        self._logger = logger

    def normalize(self, name: str) -> Result[RoleKey, ValidationError]:
        """Normalize a raw role name.

        Returns:
            Success(RoleKey) or Failure(ValidationError) with
            ``INVALID_ROLE_NAME``.
        """
        try:
            return Success(value=RoleKey(name))
        except ValueError:
            return Failure(error=_invalid_role_name())

    def normalize_all(
        self, names: Iterable[str]
    ) -> Result[list[RoleKey], ValidationError]:
        """Normalize and de-duplicate a set of role names.

        Fails on the first malformed name; nothing is normalized partially.

        Returns:
            Success(list[RoleKey]) sorted by key, or Failure(ValidationError).
        """
        keys: dict[str, RoleKey] = {}
        for name in names:
            key_result = self.normalize(name)
            if isinstance(key_result, Failure):
                return key_result
            keys[key_result.value.value] = key_result.value
        return Success(value=[keys[k] for k in sorted(keys)])

    async def ensure_system_roles(self) -> None:
        """Create the ADMIN system role if the store has none."""
        await self.ensure_exist([RoleKey(ADMIN_ROLE)])

    async def list_catalog(self) -> list[Role]:
        """Return every role ordered by key (ADMIN is always present)."""
        await self.ensure_system_roles()
        return await self._role_repo.list_all()

    async def create_or_update(
        self, name: str, description: str | None = None
    ) -> Result[Role, ValidationError]:
        """Upsert a role by normalized key.

        Updating an existing role only touches its description: ``None``
        leaves it unchanged, a blank string clears it.

        Returns:
            Success(Role) or Failure(ValidationError) for a malformed name.
        """
        key_result = self.normalize(name)
        if isinstance(key_result, Failure):
            return key_result
        key = key_result.value

        existing = await self._role_repo.find_by_key(key.value)
        if existing is not None:
            if description is not None:
                existing.description = description.strip() or None
                await self._role_repo.save(existing)
                self._logger.info("role_updated", role=key.value)
            return Success(value=existing)

        role = Role(
            id=uuid7(),
            key=key.value,
            description=(description or "").strip() or None,
            is_system=key.is_admin,
            created_at=self._clock.now(),
        )
        await self._role_repo.save(role)
        self._logger.info("role_created", role=key.value, is_system=role.is_system)
        return Success(value=role)

    async def remove(self, name: str) -> Result[bool, ValidationError]:
        """Remove a non-system role and every assignment of it.

        Returns:
            Success(True) if the role was deleted, Success(False) when it is
            absent, a system role or ADMIN. Failure(ValidationError) for a
            malformed name.
        """
        key_result = self.normalize(name)
        if isinstance(key_result, Failure):
            return key_result
        key = key_result.value

        if key.is_admin:
            self._logger.warning("role_remove_refused", role=key.value, reason="admin")
            return Success(value=False)

        role = await self._role_repo.find_by_key(key.value)
        if role is None:
            return Success(value=False)
        if role.is_system:
            self._logger.warning("role_remove_refused", role=key.value, reason="system")
            return Success(value=False)

        await self._assignment_repo.delete_for_role(role.id)
        await self._role_repo.delete(role.id)
        self._logger.info("role_removed", role=key.value)
        return Success(value=True)

    async def ensure_exist(self, keys: Iterable[RoleKey]) -> list[Role]:
        """Create any missing roles in one batch.

        Returns:
            Every requested role (existing and created), ordered by key.
        """
        wanted = sorted({key.value: key for key in keys}.items())
        if not wanted:
            return []

        existing = await self._role_repo.find_by_keys([k for k, _ in wanted])
        known = {role.key for role in existing}
        now = self._clock.now()
        created = [
            Role(
                id=uuid7(),
                key=value,
                description=None,
                is_system=key.is_admin,
                created_at=now,
            )
            for value, key in wanted
            if value not in known
        ]
        if created:
            await self._role_repo.save_many(created)
            self._logger.info(
                "roles_auto_created", roles=[role.key for role in created]
            )
        return sorted([*existing, *created], key=lambda role: role.key)

    async def role_keys_for(self, principal_id: UUID) -> list[str]:
        """Return the sorted role keys assigned to a principal."""
        role_ids = await self._assignment_repo.find_role_ids(principal_id)
        if not role_ids:
            return []
        roles = await self._role_repo.find_by_ids(role_ids)
        return sorted({role.key for role in roles})

    async def replace_assignments(
        self, principal_id: UUID, keys: Iterable[RoleKey]
    ) -> list[str]:
        """Replace a principal's role set, creating missing roles first.

        Returns:
            The principal's sorted role keys after the replacement.
        """
        roles = await self.ensure_exist(keys)
        await self._assignment_repo.replace_for_principal(
            principal_id, [role.id for role in roles]
        )
        return [role.key for role in roles]
