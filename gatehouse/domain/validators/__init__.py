"""Domain validators package."""

from gatehouse.domain.validators.functions import (
    normalize_email,
    validate_email,
    validate_strong_password,
)

__all__ = ["normalize_email", "validate_email", "validate_strong_password"]
