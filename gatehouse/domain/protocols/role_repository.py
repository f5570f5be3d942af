"""RoleRepository and RoleAssignmentRepository protocols (ports).

Roles form a catalog keyed by normalized role key. Assignments are a
many-to-many join between principals and roles, unique per pair.
"""

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from gatehouse.domain.entities import Role


class RoleRepository(Protocol):
    """Protocol for the role catalog."""

    async def list_all(self) -> list[Role]:
        """Return every role ordered by key."""
        ...

    async def find_by_key(self, key: str) -> Role | None:
        """Find a role by normalized key."""
        ...

    async def find_by_keys(self, keys: Sequence[str]) -> list[Role]:
        """Find every role whose key is in ``keys`` (ordered by key)."""
        ...

    async def find_by_ids(self, role_ids: Sequence[UUID]) -> list[Role]:
        """Find every role whose id is in ``role_ids`` (ordered by key)."""
        ...

    async def save(self, role: Role) -> None:
        """Insert a role, or overwrite the row with the same id."""
        ...

    async def save_many(self, roles: Sequence[Role]) -> None:
        """Insert a batch of roles."""
        ...

    async def delete(self, role_id: UUID) -> None:
        """Delete a role row."""
        ...


class RoleAssignmentRepository(Protocol):
    """Protocol for principal-role assignments."""

    async def find_role_ids(self, principal_id: UUID) -> list[UUID]:
        """Return the ids of every role assigned to a principal."""
        ...

    async def replace_for_principal(
        self, principal_id: UUID, role_ids: Sequence[UUID]
    ) -> None:
        """Replace a principal's assignments with exactly ``role_ids``."""
        ...

    async def delete_for_role(self, role_id: UUID) -> None:
        """Remove a role from every principal."""
        ...
