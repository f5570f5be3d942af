"""Logging notifier (stub adapter).

Implements NotifierProtocol by recording that a notification would have been
sent. Hosts replace it with real email/SMS delivery. Token values are never
written to the log.
"""

from gatehouse.domain.entities import Principal
from gatehouse.domain.protocols import LoggerProtocol


class LoggingNotifier:
    """Notifier that only logs delivery intents."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger.bind(component="notifier")

    async def send_email_verification(self, email: str, token: str) -> None:
        self._logger.info("stub_email_verification", recipient=email)

    async def send_password_reset(self, email: str, token: str) -> None:
        self._logger.info("stub_password_reset", recipient=email)

    async def send_admins_account_verified(
        self, admin_emails: list[str], principal: Principal
    ) -> None:
        self._logger.info(
            "stub_admins_account_verified",
            recipients=len(admin_emails),
            principal_id=str(principal.id),
        )

    async def send_account_approved(
        self, email: str, first_name: str | None = None
    ) -> None:
        self._logger.info("stub_account_approved", recipient=email)
