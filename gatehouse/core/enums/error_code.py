"""Machine-readable error codes carried by every DomainError.

Codes follow the ENTITY_REASON naming convention. Access-gate block reasons
reuse their own names so a caller can map a login failure straight back to
the reason that blocked it.
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable)."""

    # Validation errors
    INVALID_ROLE_NAME = "invalid_role_name"
    INVALID_EMAIL = "invalid_email"
    PASSWORD_TOO_WEAK = "password_too_weak"
    VALIDATION_FAILED = "validation_failed"

    # Authentication errors
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    INVALID_ACCESS_TOKEN = "invalid_access_token"
    INVALID_RESET_TOKEN = "invalid_reset_token"
    INVALID_VERIFICATION_TOKEN = "invalid_verification_token"

    # Access gate block reasons
    ACCOUNT_DEACTIVATED = "ACCOUNT_DEACTIVATED"
    EMAIL_VERIFICATION_REQUIRED = "EMAIL_VERIFICATION_REQUIRED"
    PHONE_VERIFICATION_REQUIRED = "PHONE_VERIFICATION_REQUIRED"
    ADMIN_APPROVAL_REQUIRED = "ADMIN_APPROVAL_REQUIRED"

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"

    # Conflict errors
    DUPLICATE_EMAIL = "duplicate_email"

    # Resource errors
    PRINCIPAL_NOT_FOUND = "principal_not_found"
