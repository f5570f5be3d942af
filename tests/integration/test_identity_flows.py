"""End-to-end identity flows over real bcrypt and JWT.

Tests cover:
- Registration -> verification -> approval -> login
- Refresh token rotation and reuse rejection
- Concurrent refresh and reset redemption (exactly one winner)
- Password reset request shape for unknown emails
- Role claims embedded in access tokens
- Protected ADMIN role
"""

import asyncio

import pytest

from gatehouse.core.container import Services, build_services
from gatehouse.core.enums import ErrorCode
from gatehouse.core.result import Failure, Success
from gatehouse.infrastructure.security import BcryptCredentialHasher
from tests.utils.fakes import STRONG_PASSWORD


@pytest.fixture
def services(store, notifier, settings, clock, logger) -> Services:
    """Services wired with the real bcrypt hasher from settings."""
    return build_services(
        store,
        notifier,
        settings,
        clock=clock,
        logger=logger,
        expose_debug_tokens=True,
    )


async def register_and_activate(services: Services, email: str) -> None:
    registered = await services.identity.register(email, STRONG_PASSWORD)
    assert isinstance(registered, Success)
    token = registered.value.debug_token
    assert isinstance(await services.identity.verify_email_by_token(token), Success)
    approved = await services.access_workflows.set_admin_approval(
        registered.value.user.id, True
    )
    assert isinstance(approved, Success)


@pytest.mark.integration
class TestRegistrationToLogin:
    async def test_wires_real_bcrypt(self, services, store):
        await services.identity.register("user@example.com", STRONG_PASSWORD)
        principal = await store.principals.find_by_email("user@example.com")
        record = await store.credentials.find_by_principal_id(principal.id)

        assert record.password_hash.startswith("$2b$04$")
        assert BcryptCredentialHasher(rounds=4).verify(STRONG_PASSWORD, record.password_hash)

    async def test_email_normalized_and_verification_required(self, services):
        registered = await services.identity.register("  USER@EX.com ", STRONG_PASSWORD)
        assert isinstance(registered, Success)
        assert registered.value.user.email == "user@ex.com"

        result = await services.identity.login("user@ex.com", STRONG_PASSWORD)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.EMAIL_VERIFICATION_REQUIRED

    async def test_approval_required_after_verification(self, services):
        registered = await services.identity.register("user@example.com", STRONG_PASSWORD)
        await services.identity.verify_email_by_token(registered.value.debug_token)

        result = await services.identity.login("user@example.com", STRONG_PASSWORD)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.ADMIN_APPROVAL_REQUIRED

    async def test_full_onboarding_then_login(self, services, notifier):
        await register_and_activate(services, "user@example.com")

        result = await services.identity.login("USER@example.com", STRONG_PASSWORD)

        assert isinstance(result, Success)
        assert result.value.token_type == "bearer"
        assert result.value.user.email == "user@example.com"
        claims = await services.identity.authenticate_access_token(
            f"Bearer {result.value.access_token}"
        )
        assert isinstance(claims, Success)
        assert claims.value.subject == result.value.user.id
        notifier.send_account_approved.assert_awaited_once()

    async def test_wrong_password_and_unknown_email_look_identical(self, services):
        await register_and_activate(services, "user@example.com")

        wrong = await services.identity.login("user@example.com", "Wrong1234")
        unknown = await services.identity.login("nobody@example.com", STRONG_PASSWORD)

        assert wrong.error.code == unknown.error.code == ErrorCode.INVALID_CREDENTIALS
        assert wrong.error.message == unknown.error.message


@pytest.mark.integration
class TestRefreshRotation:
    async def test_rotated_token_cannot_be_reused(self, services):
        await register_and_activate(services, "user@example.com")
        login = await services.identity.login("user@example.com", STRONG_PASSWORD)
        original = login.value.refresh_token

        rotated = await services.identity.refresh(original)
        reused = await services.identity.refresh(original)

        assert isinstance(rotated, Success)
        assert rotated.value.refresh_token != original
        assert isinstance(reused, Failure)
        assert reused.error.code == ErrorCode.INVALID_REFRESH_TOKEN
        assert isinstance(await services.identity.refresh(rotated.value.refresh_token), Success)

    async def test_concurrent_refresh_has_exactly_one_winner(self, services):
        await register_and_activate(services, "user@example.com")
        login = await services.identity.login("user@example.com", STRONG_PASSWORD)
        token = login.value.refresh_token

        results = await asyncio.gather(
            services.identity.refresh(token), services.identity.refresh(token)
        )

        successes = [r for r in results if isinstance(r, Success)]
        failures = [r for r in results if isinstance(r, Failure)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert failures[0].error.code == ErrorCode.INVALID_REFRESH_TOKEN

    async def test_logout_revokes_refresh_token(self, services):
        await register_and_activate(services, "user@example.com")
        login = await services.identity.login("user@example.com", STRONG_PASSWORD)

        assert isinstance(await services.identity.logout(login.value.refresh_token), Success)
        result = await services.identity.refresh(login.value.refresh_token)

        assert isinstance(result, Failure)

    async def test_deactivated_principal_cannot_refresh(self, services):
        await register_and_activate(services, "user@example.com")
        login = await services.identity.login("user@example.com", STRONG_PASSWORD)
        await services.access_workflows.set_active(login.value.user.id, False)

        result = await services.identity.refresh(login.value.refresh_token)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.ACCOUNT_DEACTIVATED


@pytest.mark.integration
class TestPasswordReset:
    async def test_unknown_email_same_shape_without_notification(self, services, notifier):
        result = await services.identity.request_password_reset("nobody@example.com")

        assert isinstance(result, Success)
        assert result.value.debug_token is None
        notifier.send_password_reset.assert_not_called()

    async def test_reset_replaces_password_and_revokes_sessions(self, services):
        await register_and_activate(services, "user@example.com")
        login = await services.identity.login("user@example.com", STRONG_PASSWORD)
        requested = await services.identity.request_password_reset("user@example.com")

        result = await services.identity.reset_password(
            requested.value.debug_token, "NewPass123"
        )

        assert isinstance(result, Success)
        assert isinstance(await services.identity.refresh(login.value.refresh_token), Failure)
        old = await services.identity.login("user@example.com", STRONG_PASSWORD)
        new = await services.identity.login("user@example.com", "NewPass123")
        assert old.error.code == ErrorCode.INVALID_CREDENTIALS
        assert isinstance(new, Success)

    async def test_concurrent_redemption_has_exactly_one_winner(self, services):
        await register_and_activate(services, "user@example.com")
        requested = await services.identity.request_password_reset("user@example.com")
        token = requested.value.debug_token

        results = await asyncio.gather(
            services.identity.reset_password(token, "FirstPass1"),
            services.identity.reset_password(token, "SecondPass2"),
        )

        assert sum(isinstance(r, Success) for r in results) == 1
        failure = next(r for r in results if isinstance(r, Failure))
        assert failure.error.code == ErrorCode.INVALID_RESET_TOKEN


@pytest.mark.integration
class TestRoles:
    async def test_role_claims_are_normalized_and_sorted(self, services):
        await register_and_activate(services, "user@example.com")
        login = await services.identity.login("user@example.com", STRONG_PASSWORD)
        principal_id = login.value.user.id

        assigned = await services.access_workflows.set_principal_roles(
            principal_id, ["coach", "ADMIN", "Coach"]
        )
        relogin = await services.identity.login("user@example.com", STRONG_PASSWORD)
        claims = await services.identity.authenticate_access_token(relogin.value.access_token)

        assert assigned.value.roles == ["ADMIN", "COACH"]
        assert claims.value.roles == ["ADMIN", "COACH"]
        assert relogin.value.user.roles == ["ADMIN", "COACH"]

    async def test_admin_role_cannot_be_removed(self, services):
        catalog = await services.access_workflows.list_roles()
        removed = await services.access_workflows.remove_role("ADMIN")

        assert [r.role for r in catalog.value] == ["ADMIN"]
        assert catalog.value[0].is_system is True
        assert removed.value is False

    async def test_verification_notifies_active_admins(self, services, notifier):
        await register_and_activate(services, "admin@example.com")
        admin = await services.identity.login("admin@example.com", STRONG_PASSWORD)
        await services.access_workflows.set_principal_roles(admin.value.user.id, ["admin"])
        registered = await services.identity.register("new@example.com", STRONG_PASSWORD)

        result = await services.access_workflows.mark_email_verified_and_notify_admins(
            registered.value.user.id
        )

        assert result.value.notified is True
        assert result.value.admin_emails == ["admin@example.com"]
        notifier.send_admins_account_verified.assert_awaited_once()
