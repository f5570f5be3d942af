"""Centralized validation functions.

Validators are pure functions that raise ValueError on validation failure and
return the (possibly normalized) value otherwise. Services translate the
ValueError into a ValidationError result.
"""

import re

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(v: str) -> str:
    """Trim and lowercase an email address.

    Example:
        >>> normalize_email("  USER@Ex.com ")
        'user@ex.com'
    """
    return v.strip().lower()


def validate_email(v: str) -> str:
    """Validate email format.

    Args:
        v: Email address to validate.

    Returns:
        Normalized email (trimmed, lowercase).

    Raises:
        ValueError: If email format is invalid.

    Example:
        >>> validate_email("User@Example.COM")
        'user@example.com'
    """
    normalized = normalize_email(v)
    if not _EMAIL_PATTERN.match(normalized):
        raise ValueError("Invalid email format")
    return normalized


def validate_strong_password(v: str) -> str:
    """Validate password strength.

    Requires at least one uppercase letter, one lowercase letter and one
    digit. The message never echoes the password.

    Returns:
        Password unchanged (validation only).

    Raises:
        ValueError: If the password doesn't meet requirements.
    """
    if not any(c.isupper() for c in v):
        raise ValueError("Password must contain uppercase letter")
    if not any(c.islower() for c in v):
        raise ValueError("Password must contain lowercase letter")
    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain digit")
    return v
