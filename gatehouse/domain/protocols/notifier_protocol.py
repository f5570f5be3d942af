"""Notifier protocol (port) for outbound account notifications.

Delivery (email, SMS) belongs to the host. From the engine's perspective
every call is fire-and-forget: a failing notifier never rolls back the state
change that triggered it.
"""

from typing import Protocol

from gatehouse.domain.entities import Principal


class NotifierProtocol(Protocol):
    """Outbound notification capability.

    This is a Protocol (not ABC) for structural typing. Implementations don't
    need to inherit from this.
    """

    async def send_email_verification(self, email: str, token: str) -> None:
        """Send the email verification token to a newly registered principal."""
        ...

    async def send_password_reset(self, email: str, token: str) -> None:
        """Send a password reset token."""
        ...

    async def send_admins_account_verified(
        self, admin_emails: list[str], principal: Principal
    ) -> None:
        """Tell every active admin that ``principal`` verified their email."""
        ...

    async def send_account_approved(
        self, email: str, first_name: str | None = None
    ) -> None:
        """Tell a principal their account has been approved."""
        ...
