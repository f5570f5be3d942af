"""PrincipalRepository protocol (port).

The host owns principal storage. The engine needs lookups by id and by
normalized email, creation at registration, and the admin roster query used
when an email verification must be announced.
"""

from typing import Protocol
from uuid import UUID

from gatehouse.domain.entities import Principal


class PrincipalRepository(Protocol):
    """Protocol for principal lookups and creation."""

    async def find_by_id(self, principal_id: UUID) -> Principal | None:
        """Find a principal by id."""
        ...

    async def find_by_email(self, email: str) -> Principal | None:
        """Find a principal by normalized (trimmed, lowercase) email."""
        ...

    async def save(self, principal: Principal) -> bool:
        """Create a principal.

        Returns:
            False if the email is already taken (nothing written).
        """
        ...

    async def find_active_with_role(self, role_key: str) -> list[Principal]:
        """Find principals holding ``role_key`` whose credential record is active.

        Each principal appears once even if the role is assigned twice.
        """
        ...
