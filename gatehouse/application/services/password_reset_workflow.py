"""Password reset workflow.

Issues, stores and redeems one-time password reset tokens.

Flow (request):
1. Normalize email and look up the principal and credential record
2. No match: return the same success shape, send nothing
3. Generate a 64-char hex token and persist it with an expiry
4. Hand the token to the notifier (fire-and-forget)

Flow (redeem):
1. Validate the new password's strength
2. Look up the token; reject when missing, used, or expired
3. Hash the new password
4. Atomically mark the token used; a concurrent loser is rejected
5. Store the new password hash
6. Revoke the principal's refresh tokens (when configured)

Security:
- request never reveals whether an email is registered
- tokens never appear in logs or error messages
"""

import secrets
from datetime import timedelta
from uuid import UUID

from gatehouse.application.dtos import PasswordResetRequested
from gatehouse.application.services.notification_guard import notify_safely
from gatehouse.application.services.refresh_token_ledger import RefreshTokenLedger
from gatehouse.core.constants import TOKEN_BYTES
from gatehouse.core.enums import ErrorCode
from gatehouse.core.errors import AuthenticationError, DomainError, ValidationError
from gatehouse.core.result import Failure, Result, Success
from gatehouse.domain.protocols import (
    ClockProtocol,
    CredentialHasherProtocol,
    CredentialRepository,
    LoggerProtocol,
    NotifierProtocol,
    PasswordResetTokenRepository,
    PrincipalRepository,
)
from gatehouse.domain.validators import normalize_email, validate_strong_password


def _invalid_reset_token() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_RESET_TOKEN,
        message="Invalid password reset token",
    )


class PasswordResetWorkflow:
    """One-time password reset token lifecycle."""

    def __init__(
        self,
        principal_repo: PrincipalRepository,
        credential_repo: CredentialRepository,
        reset_token_repo: PasswordResetTokenRepository,
        hasher: CredentialHasherProtocol,
        ledger: RefreshTokenLedger,
        notifier: NotifierProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
        expire_minutes: int = 30,
        revoke_sessions: bool = True,
        expose_debug_tokens: bool = False,
    ) -> None:
        """Initialize reset workflow.

        Args:
            principal_repo: Principal lookups by email.
            credential_repo: Credential records to update.
            reset_token_repo: Reset token persistence.
            hasher: Password hasher.
            ledger: Refresh token ledger (session revocation).
            notifier: Outbound notifications.
            clock: Time source.
            logger: Structured logger.
            expire_minutes: Reset token lifetime.
            revoke_sessions: Revoke refresh tokens after a successful reset.
            expose_debug_tokens: Echo the token in the request result.
        """
        self._principal_repo = principal_repo
        self._credential_repo = credential_repo
        self._reset_token_repo = reset_token_repo
        self._hasher = hasher
        self._ledger = ledger
        self._notifier = notifier
        self._clock = clock
        self._logger = logger
        self._ttl = timedelta(minutes=expire_minutes)
        self._revoke_sessions = revoke_sessions
        self._expose_debug_tokens = expose_debug_tokens

    async def request(self, email: str) -> Result[PasswordResetRequested, DomainError]:
        """Start a password reset.

        Always succeeds with the same shape whether or not the email matches.
        """
        principal = await self._principal_repo.find_by_email(normalize_email(email))
        record = (
            await self._credential_repo.find_by_principal_id(principal.id)
            if principal is not None
            else None
        )
        if principal is None or record is None:
            self._logger.info("password_reset_requested", matched=False)
            return Success(value=PasswordResetRequested())

        now = self._clock.now()
        token = secrets.token_hex(TOKEN_BYTES)  # 64-char hex string
        await self._reset_token_repo.save(
            principal_id=principal.id,
            token=token,
            expires_at=now + self._ttl,
            created_at=now,
        )
        self._logger.info(
            "password_reset_requested",
            matched=True,
            principal_id=str(principal.id),
        )

        await notify_safely(
            self._logger,
            "password_reset",
            lambda: self._notifier.send_password_reset(principal.email, token),
            principal_id=str(principal.id),
        )

        return Success(
            value=PasswordResetRequested(
                debug_token=token if self._expose_debug_tokens else None
            )
        )

    async def redeem(self, token: str, new_password: str) -> Result[UUID, DomainError]:
        """Redeem a reset token and set a new password.

        Returns:
            Success(principal_id) or Failure with ``PASSWORD_TOO_WEAK`` or
            ``INVALID_RESET_TOKEN``.
        """
        try:
            validate_strong_password(new_password)
        except ValueError as e:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.PASSWORD_TOO_WEAK,
                    message=str(e),
                    field="new_password",
                )
            )

        now = self._clock.now()
        reset = await self._reset_token_repo.find_by_token(token) if token else None
        if reset is None or not reset.is_usable(now):
            self._logger.warning("password_reset_rejected", reason="token_unusable")
            return Failure(error=_invalid_reset_token())

        if await self._credential_repo.find_by_principal_id(reset.principal_id) is None:
            self._logger.warning(
                "password_reset_rejected",
                reason="credential_missing",
                principal_id=str(reset.principal_id),
            )
            return Failure(error=_invalid_reset_token())

        password_hash = self._hasher.hash(new_password)

        # Check-and-set: only one concurrent redemption flips used_at
        if not await self._reset_token_repo.mark_used(reset.id, now):
            self._logger.warning(
                "password_reset_rejected",
                reason="already_used",
                principal_id=str(reset.principal_id),
            )
            return Failure(error=_invalid_reset_token())

        await self._credential_repo.update_password_hash(reset.principal_id, password_hash)

        if self._revoke_sessions:
            await self._ledger.revoke_all(reset.principal_id)

        self._logger.info("password_reset_completed", principal_id=str(reset.principal_id))
        return Success(value=reset.principal_id)
