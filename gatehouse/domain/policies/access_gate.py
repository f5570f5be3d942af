"""Access gate: pure policy deciding whether a principal may proceed.

The gate combines account-state flags into an allow/deny decision. It has no
I/O and no side effects, so it runs identically during login and refresh and
is testable without any store.

Evaluation order is fixed and short-circuits at the first violated
requirement:
    1. active
    2. email verified
    3. phone verified
    4. admin approved

Usage:
    state = PrincipalState(
        is_active=True,
        email_verified_at=None,
        admin_approved_at=None,
    )
    decide(state)  # AccessBlockReason.EMAIL_VERIFICATION_REQUIRED
    decide(state, AccessGateOptions(require_email_verification=False))
    # AccessBlockReason.ADMIN_APPROVAL_REQUIRED
"""

from dataclasses import dataclass
from datetime import datetime

from gatehouse.domain.enums import AccessBlockReason


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessGateOptions:
    """Requirement flags, each independently overridable.

    Attributes:
        require_active: Block deactivated accounts.
        require_email_verification: Block until the email is verified.
        require_phone_verification: Block until the phone is verified.
        require_admin_approval: Block until an admin approves the account.
    """

    require_active: bool = True
    require_email_verification: bool = True
    require_phone_verification: bool = False
    require_admin_approval: bool = True


@dataclass(frozen=True, slots=True, kw_only=True)
class PrincipalState:
    """Account-state flags the gate reads."""

    is_active: bool
    email_verified_at: datetime | None
    admin_approved_at: datetime | None
    phone_verified_at: datetime | None = None


DEFAULT_OPTIONS = AccessGateOptions()


def decide(
    state: PrincipalState,
    options: AccessGateOptions | None = None,
) -> AccessBlockReason | None:
    """Return the first violated requirement, or None when access is allowed.

    Args:
        state: Account-state flags of the principal.
        options: Requirement flags (defaults to DEFAULT_OPTIONS).

    Returns:
        AccessBlockReason for the first enabled requirement the principal
        fails, None if every enabled requirement is satisfied.
    """
    effective = options or DEFAULT_OPTIONS

    if effective.require_active and not state.is_active:
        return AccessBlockReason.ACCOUNT_DEACTIVATED

    if effective.require_email_verification and state.email_verified_at is None:
        return AccessBlockReason.EMAIL_VERIFICATION_REQUIRED

    if effective.require_phone_verification and state.phone_verified_at is None:
        return AccessBlockReason.PHONE_VERIFICATION_REQUIRED

    if effective.require_admin_approval and state.admin_approved_at is None:
        return AccessBlockReason.ADMIN_APPROVAL_REQUIRED

    return None


def block_reason_message(reason: AccessBlockReason | None) -> str:
    """Human-readable message for a gate decision ("Unauthorized" fallback)."""
    if reason is None:
        return "Unauthorized"
    return reason.message
