"""Domain value objects."""

from gatehouse.domain.value_objects.role_key import (
    RoleKey,
    has_role,
    is_admin,
    normalize_role_name,
)

__all__ = ["RoleKey", "has_role", "is_admin", "normalize_role_name"]
