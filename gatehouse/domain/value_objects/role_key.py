"""RoleKey value object.

A RoleKey is the normalized, validated identity of a role. It can only be
built through validation: construction normalizes the raw name (trim, upper
case, whitespace runs to underscores, legacy ADMINISTRATOR alias to ADMIN) and
rejects anything that does not match ``^[A-Z][A-Z0-9_]*$``.

Normalization is idempotent: ``RoleKey(str(RoleKey(x))) == RoleKey(x)``.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from gatehouse.core.constants import ADMIN_ROLE, LEGACY_ADMIN_ALIAS

_ROLE_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*$")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class RoleKey:
    """Normalized role key.

    Attributes:
        value: Upper-case key matching ``^[A-Z][A-Z0-9_]*$``.

    Raises:
        ValueError: If the normalized name is empty or malformed.

    Example:
        >>> RoleKey(" team lead ").value
        'TEAM_LEAD'
        >>> RoleKey("administrator").value
        'ADMIN'
        >>> RoleKey("1st")
        Traceback (most recent call last):
        ...
        ValueError: Invalid role name
    """

    value: str

    def __post_init__(self) -> None:
        """Normalize and validate the raw role name."""
        normalized = _WHITESPACE.sub("_", self.value.strip().upper())
        if not _ROLE_KEY_PATTERN.match(normalized):
            raise ValueError("Invalid role name")
        if normalized == LEGACY_ADMIN_ALIAS:
            normalized = ADMIN_ROLE
        object.__setattr__(self, "value", normalized)

    @property
    def is_admin(self) -> bool:
        """True for the reserved ADMIN system role."""
        return self.value == ADMIN_ROLE

    def __str__(self) -> str:
        return self.value


def normalize_role_name(name: str) -> str:
    """Normalize a role name to its key string.

    Raises:
        ValueError: If the name cannot be normalized.
    """
    return RoleKey(name).value


def has_role(roles: Iterable[str], role: str) -> bool:
    """Check whether ``roles`` contains ``role`` after normalizing both sides.

    Assigned roles that cannot be normalized are ignored rather than treated
    as errors.

    Raises:
        ValueError: If the required ``role`` itself is malformed.
    """
    required = normalize_role_name(role)
    for assigned in roles:
        try:
            if normalize_role_name(assigned) == required:
                return True
        except ValueError:
            continue
    return False


def is_admin(roles: Iterable[str]) -> bool:
    """Check whether ``roles`` grants the ADMIN system role."""
    return has_role(roles, ADMIN_ROLE)
