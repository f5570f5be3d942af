"""Role domain entity and its catalog projection."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Role:
    """Role catalog row.

    Attributes:
        id: Unique identifier.
        key: Normalized role key (see RoleKey).
        description: Optional free-text description.
        is_system: True for protected roles (only ADMIN).
        created_at: When the role was created.
    """

    id: UUID
    key: str
    description: str | None
    is_system: bool
    created_at: datetime
