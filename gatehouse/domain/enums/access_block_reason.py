"""Reasons the access gate can refuse an authenticated principal.

Each member names the first requirement a principal failed. Values are the
upper-case reason strings returned to callers.
"""

from enum import Enum


class AccessBlockReason(str, Enum):
    """Access gate block reasons, in evaluation order."""

    ACCOUNT_DEACTIVATED = "ACCOUNT_DEACTIVATED"
    EMAIL_VERIFICATION_REQUIRED = "EMAIL_VERIFICATION_REQUIRED"
    PHONE_VERIFICATION_REQUIRED = "PHONE_VERIFICATION_REQUIRED"
    ADMIN_APPROVAL_REQUIRED = "ADMIN_APPROVAL_REQUIRED"

    @property
    def message(self) -> str:
        """Human-readable message for this reason."""
        return _MESSAGES[self]

    @classmethod
    def values(cls) -> list[str]:
        """Get all reason values as strings."""
        return [reason.value for reason in cls]


_MESSAGES: dict[AccessBlockReason, str] = {
    AccessBlockReason.ACCOUNT_DEACTIVATED: "Account deactivated",
    AccessBlockReason.EMAIL_VERIFICATION_REQUIRED: "Email verification required",
    AccessBlockReason.PHONE_VERIFICATION_REQUIRED: "Phone verification required",
    AccessBlockReason.ADMIN_APPROVAL_REQUIRED: "Admin approval required",
}
