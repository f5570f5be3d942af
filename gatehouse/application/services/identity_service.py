"""Identity service.

Orchestrates the principal-facing flows: registration, login, refresh token
rotation, logout, password change and reset, email verification, and access
token authentication.

State machine per principal:
    Unregistered -> Registered (unverified) -> Verified -> Approved
with an orthogonal Active/Inactive flag evaluated by the access gate.

Security:
    - Unknown email and wrong password fail identically (INVALID_CREDENTIALS),
      and an unknown email still pays for one bcrypt comparison
    - A presented refresh token is revoked before new tokens are minted, so
      only one concurrent caller can rotate it
    - Passwords and tokens are never logged or echoed in errors

Usage:
    result = await identity.login("user@example.com", "Secret123")
    if isinstance(result, Success):
        tokens = result.value
"""

import secrets
from uuid import UUID

from uuid_extensions import uuid7

from gatehouse.application.dtos import (
    AuthResult,
    PasswordResetRequested,
    PrincipalRoles,
    PrincipalView,
    RegistrationResult,
)
from gatehouse.application.services.notification_guard import notify_safely
from gatehouse.application.services.password_reset_workflow import (
    PasswordResetWorkflow,
)
from gatehouse.application.services.refresh_token_ledger import RefreshTokenLedger
from gatehouse.application.services.role_registry import RoleRegistry
from gatehouse.application.services.token_issuer import TokenIssuer
from gatehouse.core.constants import BEARER_PREFIX, TOKEN_BYTES
from gatehouse.core.enums import ErrorCode
from gatehouse.core.errors import (
    AuthenticationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from gatehouse.core.result import Failure, Result, Success
from gatehouse.domain.entities import CredentialRecord, Principal
from gatehouse.domain.policies import (
    DEFAULT_OPTIONS,
    AccessGateOptions,
    decide,
)
from gatehouse.domain.protocols import (
    AccessTokenClaims,
    ClockProtocol,
    CredentialHasherProtocol,
    CredentialRepository,
    LoggerProtocol,
    NotifierProtocol,
    PrincipalRepository,
)
from gatehouse.domain.validators import (
    normalize_email,
    validate_email,
    validate_strong_password,
)

# Compared against when no credential exists so unknown emails cost the same
_TIMING_DUMMY_PASSWORD = "gatehouse-timing-equalization"


def _invalid_credentials() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_CREDENTIALS,
        message="Invalid credentials",
    )


def _invalid_refresh_token() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_REFRESH_TOKEN,
        message="Invalid refresh token",
    )


def _invalid_verification_token() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_VERIFICATION_TOKEN,
        message="Invalid verification token",
    )


def _weak_password(e: ValueError, field: str) -> ValidationError:
    return ValidationError(code=ErrorCode.PASSWORD_TOO_WEAK, message=str(e), field=field)


class IdentityService:
    """Principal-facing authentication flows.

    Dependencies (injected via constructor):
        - PrincipalRepository / CredentialRepository: account state
        - RoleRegistry: role keys for token claims
        - TokenIssuer: access/refresh token minting
        - RefreshTokenLedger: refresh token matching and revocation
        - PasswordResetWorkflow: reset token lifecycle
        - CredentialHasherProtocol: password hashing
        - NotifierProtocol: verification emails
        - ClockProtocol, LoggerProtocol
    """

    def __init__(
        self,
        principal_repo: PrincipalRepository,
        credential_repo: CredentialRepository,
        role_registry: RoleRegistry,
        token_issuer: TokenIssuer,
        ledger: RefreshTokenLedger,
        reset_workflow: PasswordResetWorkflow,
        hasher: CredentialHasherProtocol,
        notifier: NotifierProtocol,
        clock: ClockProtocol,
        logger: LoggerProtocol,
        gate_options: AccessGateOptions = DEFAULT_OPTIONS,
        revoke_sessions_on_password_change: bool = True,
        expose_debug_tokens: bool = False,
    ) -> None:
        self._principal_repo = principal_repo
        self._credential_repo = credential_repo
        self._roles = role_registry
        self._issuer = token_issuer
        self._ledger = ledger
        self._reset_workflow = reset_workflow
        self._hasher = hasher
        self._notifier = notifier
        self._clock = clock
        self._logger = logger
        self._gate_options = gate_options
        self._revoke_sessions_on_password_change = revoke_sessions_on_password_change
        self._expose_debug_tokens = expose_debug_tokens
        self._dummy_hash: str | None = None

    # =========================================================================
    # Registration and verification
    # =========================================================================

    async def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> Result[RegistrationResult, DomainError]:
        """Register credentials for an email.

        Creates the principal when the host has none for the email; attaches
        a credential record to an existing principal that has none.

        Returns:
            Success(RegistrationResult) or Failure with ``VALIDATION_FAILED``
            (missing field), ``INVALID_EMAIL``, ``PASSWORD_TOO_WEAK`` or
            ``DUPLICATE_EMAIL``.
        """
        # Step 1: Validate input
        for field, value in (("email", email), ("password", password)):
            if not value or not value.strip():
                return Failure(
                    error=ValidationError(
                        code=ErrorCode.VALIDATION_FAILED,
                        message=f"{field.capitalize()} is required",
                        field=field,
                    )
                )
        try:
            normalized = validate_email(email)
        except ValueError as e:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_EMAIL, message=str(e), field="email"
                )
            )
        try:
            validate_strong_password(password)
        except ValueError as e:
            return Failure(error=_weak_password(e, "password"))

        # Step 2: Check for existing credentials
        principal = await self._principal_repo.find_by_email(normalized)
        if principal is not None:
            existing = await self._credential_repo.find_by_principal_id(principal.id)
            if existing is not None:
                return self._duplicate_email()

        # Step 3: Create principal (if the host has none) and credential record.
        # A concurrent registration can win either insert between Step 2 and
        # here; the store reports that as a rejected insert.
        if principal is None:
            principal = Principal(
                id=uuid7(),
                email=normalized,
                first_name=first_name,
                last_name=last_name,
            )
            if not await self._principal_repo.save(principal):
                return self._duplicate_email()

        verification_token = secrets.token_hex(TOKEN_BYTES)  # 64-char hex string
        record = CredentialRecord(
            principal_id=principal.id,
            password_hash=self._hasher.hash(password),
            created_at=self._clock.now(),
            email_verification_token=verification_token,
        )
        if not await self._credential_repo.save(record):
            return self._duplicate_email()
        self._logger.info(
            "principal_registered",
            principal_id=str(principal.id),
            email=principal.email,
        )

        # Step 4: Send verification token (fire-and-forget)
        await notify_safely(
            self._logger,
            "email_verification",
            lambda: self._notifier.send_email_verification(
                principal.email, verification_token
            ),
            principal_id=str(principal.id),
        )

        roles = await self._roles.role_keys_for(principal.id)
        return Success(
            value=RegistrationResult(
                user=PrincipalView.from_records(principal, record, roles),
                debug_token=verification_token if self._expose_debug_tokens else None,
            )
        )

    async def verify_email_by_token(
        self, token: str
    ) -> Result[UUID, AuthenticationError]:
        """Complete email verification with a pending token.

        Returns:
            Success(principal_id) or Failure with ``INVALID_VERIFICATION_TOKEN``.
        """
        principal_id = (
            await self._credential_repo.consume_verification_token(
                token, self._clock.now()
            )
            if token
            else None
        )
        if principal_id is None:
            self._logger.warning("email_verification_rejected")
            return Failure(error=_invalid_verification_token())

        self._logger.info("email_verified", principal_id=str(principal_id))
        return Success(value=principal_id)

    async def get_principal_id_by_verification_token(
        self, token: str
    ) -> Result[UUID, AuthenticationError]:
        """Resolve the principal holding a pending verification token."""
        record = (
            await self._credential_repo.find_by_verification_token(token)
            if token
            else None
        )
        if record is None:
            return Failure(error=_invalid_verification_token())
        return Success(value=record.principal_id)

    # =========================================================================
    # Sessions
    # =========================================================================

    async def login(
        self, email: str, password: str
    ) -> Result[AuthResult, AuthenticationError]:
        """Authenticate with email and password and issue tokens.

        Returns:
            Success(AuthResult) or Failure(AuthenticationError) with
            ``INVALID_CREDENTIALS`` or the access gate's block reason.
        """
        principal = await self._principal_repo.find_by_email(normalize_email(email))
        record = (
            await self._credential_repo.find_by_principal_id(principal.id)
            if principal is not None
            else None
        )

        if principal is None or record is None:
            # Equalize timing with the wrong-password path
            self._hasher.verify(password, self._get_dummy_hash())
            self._logger.warning("login_failed", reason=ErrorCode.INVALID_CREDENTIALS.value)
            return Failure(error=_invalid_credentials())

        if not self._hasher.verify(password, record.password_hash):
            self._logger.warning(
                "login_failed",
                reason=ErrorCode.INVALID_CREDENTIALS.value,
                principal_id=str(principal.id),
            )
            return Failure(error=_invalid_credentials())

        blocked = self._check_gate(record)
        if blocked is not None:
            self._logger.warning(
                "login_blocked",
                reason=blocked.code.value,
                principal_id=str(principal.id),
            )
            return Failure(error=blocked)

        result = await self._issue(principal, record)
        self._logger.info("login_succeeded", principal_id=str(principal.id))
        return Success(value=result)

    async def refresh(self, refresh_token: str) -> Result[AuthResult, AuthenticationError]:
        """Rotate a refresh token.

        Flow:
        1. Resolve the presented token through the ledger
        2. Revoke it; a caller that loses a concurrent race is rejected
        3. Re-run the access gate (a principal deactivated after login
           cannot refresh)
        4. Issue a new token pair

        Returns:
            Success(AuthResult) or Failure(AuthenticationError) with
            ``INVALID_REFRESH_TOKEN`` or the access gate's block reason.
        """
        token_data = await self._ledger.find_valid(refresh_token)
        if token_data is None:
            self._logger.warning("refresh_failed", reason="token_invalid")
            return Failure(error=_invalid_refresh_token())

        if not await self._ledger.revoke(token_data.id):
            self._logger.warning(
                "refresh_failed",
                reason="token_already_rotated",
                principal_id=str(token_data.principal_id),
            )
            return Failure(error=_invalid_refresh_token())

        principal = await self._principal_repo.find_by_id(token_data.principal_id)
        record = await self._credential_repo.find_by_principal_id(
            token_data.principal_id
        )
        if principal is None or record is None:
            self._logger.warning(
                "refresh_failed",
                reason="principal_not_found",
                principal_id=str(token_data.principal_id),
            )
            return Failure(error=_invalid_refresh_token())

        blocked = self._check_gate(record)
        if blocked is not None:
            self._logger.warning(
                "refresh_blocked",
                reason=blocked.code.value,
                principal_id=str(principal.id),
            )
            return Failure(error=blocked)

        result = await self._issue(principal, record)
        self._logger.info("refresh_token_rotated", principal_id=str(principal.id))
        return Success(value=result)

    async def logout(self, refresh_token: str | None = None) -> Result[None, DomainError]:
        """Revoke a refresh token, best-effort.

        Always succeeds: a missing or unknown token is not an error. Expired
        but unrevoked tokens are revoked too.
        """
        if refresh_token:
            token_data = await self._ledger.find_match(
                refresh_token, include_expired=True
            )
            if token_data is not None:
                await self._ledger.revoke(token_data.id)
                self._logger.info(
                    "logout_revoked_token", principal_id=str(token_data.principal_id)
                )
                return Success(value=None)
        self._logger.debug("logout_without_token_match")
        return Success(value=None)

    async def authenticate_access_token(
        self, token: str
    ) -> Result[AccessTokenClaims, AuthenticationError]:
        """Validate an access token (optionally with a ``Bearer`` prefix)."""
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX) :]
        return self._issuer.verify_access_token(token.strip())

    # =========================================================================
    # Passwords
    # =========================================================================

    async def change_password(
        self, principal_id: UUID, current_password: str, new_password: str
    ) -> Result[None, DomainError]:
        """Change a password after verifying the current one.

        Returns:
            Success(None) or Failure with ``PASSWORD_TOO_WEAK`` or
            ``INVALID_CREDENTIALS`` (also for an unknown principal).
        """
        try:
            validate_strong_password(new_password)
        except ValueError as e:
            return Failure(error=_weak_password(e, "new_password"))

        record = await self._credential_repo.find_by_principal_id(principal_id)
        if record is None:
            self._hasher.verify(current_password, self._get_dummy_hash())
            return Failure(error=_invalid_credentials())

        if not self._hasher.verify(current_password, record.password_hash):
            self._logger.warning(
                "password_change_rejected", principal_id=str(principal_id)
            )
            return Failure(error=_invalid_credentials())

        await self._credential_repo.update_password_hash(
            principal_id, self._hasher.hash(new_password)
        )

        if self._revoke_sessions_on_password_change:
            await self._ledger.revoke_all(principal_id)

        self._logger.info("password_changed", principal_id=str(principal_id))
        return Success(value=None)

    async def request_password_reset(
        self, email: str
    ) -> Result[PasswordResetRequested, DomainError]:
        """Start a password reset. Same result whether or not the email exists."""
        return await self._reset_workflow.request(email)

    async def reset_password(
        self, token: str, new_password: str
    ) -> Result[None, DomainError]:
        """Redeem a reset token.

        Returns:
            Success(None) or Failure with ``PASSWORD_TOO_WEAK`` or
            ``INVALID_RESET_TOKEN``.
        """
        result = await self._reset_workflow.redeem(token, new_password)
        if isinstance(result, Failure):
            return result
        return Success(value=None)

    # =========================================================================
    # Roles
    # =========================================================================

    async def get_my_roles(
        self, principal_id: UUID
    ) -> Result[PrincipalRoles, NotFoundError]:
        """Return the caller's own role keys."""
        principal = await self._principal_repo.find_by_id(principal_id)
        if principal is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.PRINCIPAL_NOT_FOUND,
                    message="Principal not found",
                    resource_type="Principal",
                    resource_id=str(principal_id),
                )
            )
        roles = await self._roles.role_keys_for(principal_id)
        return Success(value=PrincipalRoles(principal_id=principal_id, roles=roles))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _duplicate_email(self) -> Failure[ConflictError]:
        self._logger.warning("registration_rejected", reason="duplicate_email")
        return Failure(
            error=ConflictError(
                code=ErrorCode.DUPLICATE_EMAIL,
                message="Email already in use",
                resource_type="Principal",
                conflicting_field="email",
            )
        )

    def _check_gate(self, record: CredentialRecord) -> AuthenticationError | None:
        reason = decide(record.access_state(), self._gate_options)
        if reason is None:
            return None
        return AuthenticationError(code=ErrorCode(reason.value), message=reason.message)

    async def _issue(self, principal: Principal, record: CredentialRecord) -> AuthResult:
        roles = await self._roles.role_keys_for(principal.id)
        tokens = await self._issuer.issue(principal, roles)
        view = PrincipalView.from_records(principal, record, tokens.roles)
        return AuthResult.from_tokens(tokens, view)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash(_TIMING_DUMMY_PASSWORD)
        return self._dummy_hash
