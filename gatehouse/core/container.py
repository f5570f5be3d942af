"""Composition root.

Factory functions that wire the engine's services with plain constructor
arguments. Services never look anything up themselves; hosts call
``build_services`` once and keep the result.

Usage:
    from gatehouse.core.container import build_services
    from gatehouse.infrastructure.persistence import InMemoryStore

    services = build_services(InMemoryStore(), notifier, settings)
    result = await services.identity.login("user@example.com", "Secret123")
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from gatehouse.core.config import GatehouseSettings

if TYPE_CHECKING:
    from gatehouse.application.services import AccessWorkflowService, IdentityService
    from gatehouse.domain.protocols import (
        ClockProtocol,
        CredentialHasherProtocol,
        CredentialRepository,
        LoggerProtocol,
        NotifierProtocol,
        PasswordResetTokenRepository,
        PrincipalRepository,
        RefreshTokenRepository,
        RoleAssignmentRepository,
        RoleRepository,
        TokenGenerationProtocol,
    )


class StoreProtocol(Protocol):
    """Bundle of every repository the engine needs (one logical store)."""

    principals: "PrincipalRepository"
    credentials: "CredentialRepository"
    refresh_tokens: "RefreshTokenRepository"
    reset_tokens: "PasswordResetTokenRepository"
    roles: "RoleRepository"
    role_assignments: "RoleAssignmentRepository"


@dataclass(frozen=True, kw_only=True)
class Services:
    """The engine's public surface.

    Attributes:
        identity: Principal-facing authentication flows.
        access_workflows: Admin-facing access state and role management.
    """

    identity: "IdentityService"
    access_workflows: "AccessWorkflowService"


def create_credential_hasher(settings: GatehouseSettings) -> "CredentialHasherProtocol":
    """Create the bcrypt hasher with the configured cost factor."""
    from gatehouse.infrastructure.security import BcryptCredentialHasher

    return BcryptCredentialHasher(rounds=settings.bcrypt_rounds)


def create_token_service(settings: GatehouseSettings) -> "TokenGenerationProtocol":
    """Create the JWT access token service."""
    from gatehouse.infrastructure.security import JWTService

    return JWTService(
        secret_key=settings.jwt_secret,
        expiration_minutes=settings.access_token_expire_minutes,
        algorithm=settings.jwt_algorithm,
    )


def create_logger(settings: GatehouseSettings) -> "LoggerProtocol":
    """Create the structlog console adapter (JSON or human-readable)."""
    from gatehouse.infrastructure.logging import ConsoleAdapter

    return ConsoleAdapter(use_json=settings.log_json, level=settings.log_level)


def build_services(
    store: StoreProtocol,
    notifier: "NotifierProtocol",
    settings: GatehouseSettings,
    clock: "ClockProtocol | None" = None,
    logger: "LoggerProtocol | None" = None,
    hasher: "CredentialHasherProtocol | None" = None,
    expose_debug_tokens: bool = False,
) -> Services:
    """Wire the identity and access workflow services.

    Args:
        store: Repositories backing the engine.
        notifier: Outbound notification capability.
        settings: Engine settings.
        clock: Time source (default: SystemClock).
        logger: Structured logger (default: ConsoleAdapter from settings).
        hasher: Credential hasher (default: bcrypt from settings).
        expose_debug_tokens: Echo generated tokens in results (test harnesses only).

    Returns:
        Services: The public service pair.
    """
    from gatehouse.application.services import (
        AccessWorkflowService,
        IdentityService,
        PasswordResetWorkflow,
        RefreshTokenLedger,
        RoleRegistry,
        TokenIssuer,
    )
    from gatehouse.infrastructure.clock import SystemClock

    clock = clock or SystemClock()
    logger = logger or create_logger(settings)
    hasher = hasher or create_credential_hasher(settings)

    role_registry = RoleRegistry(
        role_repo=store.roles,
        assignment_repo=store.role_assignments,
        clock=clock,
        logger=logger,
    )
    ledger = RefreshTokenLedger(
        refresh_token_repo=store.refresh_tokens,
        hasher=hasher,
        clock=clock,
        logger=logger,
        scan_limit=settings.refresh_token_scan_limit,
    )
    token_issuer = TokenIssuer(
        token_service=create_token_service(settings),
        hasher=hasher,
        refresh_token_repo=store.refresh_tokens,
        clock=clock,
        refresh_token_expire_days=settings.refresh_token_expire_days,
    )
    reset_workflow = PasswordResetWorkflow(
        principal_repo=store.principals,
        credential_repo=store.credentials,
        reset_token_repo=store.reset_tokens,
        hasher=hasher,
        ledger=ledger,
        notifier=notifier,
        clock=clock,
        logger=logger,
        expire_minutes=settings.password_reset_expire_minutes,
        revoke_sessions=settings.revoke_sessions_on_password_change,
        expose_debug_tokens=expose_debug_tokens,
    )

    identity = IdentityService(
        principal_repo=store.principals,
        credential_repo=store.credentials,
        role_registry=role_registry,
        token_issuer=token_issuer,
        ledger=ledger,
        reset_workflow=reset_workflow,
        hasher=hasher,
        notifier=notifier,
        clock=clock,
        logger=logger,
        gate_options=settings.access_gate_options(),
        revoke_sessions_on_password_change=settings.revoke_sessions_on_password_change,
        expose_debug_tokens=expose_debug_tokens,
    )
    access_workflows = AccessWorkflowService(
        principal_repo=store.principals,
        credential_repo=store.credentials,
        role_registry=role_registry,
        notifier=notifier,
        clock=clock,
        logger=logger,
    )
    return Services(identity=identity, access_workflows=access_workflows)
