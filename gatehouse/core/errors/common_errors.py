"""Error taxonomy shared by every engine service.

Error Types:
- ValidationError: malformed input (role name, email, weak password). Safe to
  report verbatim.
- AuthenticationError: bad credentials or a bad/expired/revoked token. Kept
  deliberately low-information so callers cannot enumerate accounts.
- AuthorizationError: an authenticated principal lacks a required role.
- ConflictError: duplicate email on registration.
- NotFoundError: unknown principal for admin-facing operations.

Usage:
    from gatehouse.core.errors import ValidationError
    from gatehouse.core.enums import ErrorCode
    from gatehouse.core.result import Failure

    return Failure(error=ValidationError(
        code=ErrorCode.INVALID_EMAIL,
        message="Invalid email format",
        field="email",
    ))
"""

from dataclasses import dataclass

from gatehouse.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        field: Field name that failed validation.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        resource_type: Type of resource (Principal, Role).
        resource_id: ID of the resource that was not found.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Resource conflict (duplicate).

    Attributes:
        resource_type: Type of resource in conflict.
        conflicting_field: Field that has the conflict.
    """

    resource_type: str
    conflicting_field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """Authentication failure (invalid credentials, invalid token, blocked account)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationError(DomainError):
    """Authorization failure (missing role).

    Attributes:
        required_role: Role that was required.
    """

    required_role: str | None = None
