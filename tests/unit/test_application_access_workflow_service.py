"""Unit tests for AccessWorkflowService.

Tests cover:
- Email verification completion and admin notification
- Admin approval toggling and its notification rule
- Active flag flips
- Role catalog CRUD
- Per-principal role get/set/assign/remove
- Admin guard
"""

from unittest.mock import Mock

import pytest
from uuid_extensions import uuid7

from gatehouse.application.dtos import RoleDefinition
from gatehouse.core.enums import ErrorCode
from gatehouse.core.errors import AuthorizationError, NotFoundError
from gatehouse.core.result import Failure, Success


@pytest.fixture
def workflows(services):
    return services.access_workflows


@pytest.fixture
async def admin(seed_principal, workflows):
    principal = await seed_principal("boss@example.com")
    await workflows.set_principal_roles(principal.id, ["ADMIN"])
    return principal


@pytest.mark.unit
class TestEmailVerifiedNotification:
    async def test_notifies_active_admins(self, workflows, seed_principal, admin, notifier, store, clock):
        member = await seed_principal(verified=False)

        result = await workflows.mark_email_verified_and_notify_admins(member.id)

        assert isinstance(result, Success)
        assert result.value.notified is True
        assert result.value.admin_emails == ["boss@example.com"]
        record = await store.credentials.find_by_principal_id(member.id)
        assert record.email_verified_at == clock.now()
        notifier.send_admins_account_verified.assert_awaited_once()
        emails, principal = notifier.send_admins_account_verified.await_args.args
        assert emails == ["boss@example.com"]
        assert principal.id == member.id

    async def test_skips_notification_without_admins(self, workflows, seed_principal, notifier, store):
        member = await seed_principal(verified=False)

        result = await workflows.mark_email_verified_and_notify_admins(member.id)

        assert result.value.notified is False
        notifier.send_admins_account_verified.assert_not_awaited()
        record = await store.credentials.find_by_principal_id(member.id)
        assert record.email_verified_at is not None

    async def test_inactive_admins_are_not_notified(self, workflows, seed_principal, admin, notifier):
        await workflows.set_active(admin.id, False)
        member = await seed_principal(verified=False)

        result = await workflows.mark_email_verified_and_notify_admins(member.id)

        assert result.value.notified is False
        notifier.send_admins_account_verified.assert_not_awaited()

    async def test_keeps_original_verification_time(self, workflows, seed_principal, store, clock):
        member = await seed_principal(verified=True)
        original = (await store.credentials.find_by_principal_id(member.id)).email_verified_at
        clock.advance(hours=1)

        await workflows.mark_email_verified_and_notify_admins(member.id)

        record = await store.credentials.find_by_principal_id(member.id)
        assert record.email_verified_at == original

    async def test_notifier_failure_keeps_state(self, workflows, seed_principal, admin, notifier, store):
        notifier.send_admins_account_verified.side_effect = RuntimeError("down")
        member = await seed_principal(verified=False)

        result = await workflows.mark_email_verified_and_notify_admins(member.id)

        assert result.value.notified is False
        record = await store.credentials.find_by_principal_id(member.id)
        assert record.email_verified_at is not None

    async def test_unknown_principal(self, workflows):
        result = await workflows.mark_email_verified_and_notify_admins(uuid7())

        assert isinstance(result, Failure)
        assert isinstance(result.error, NotFoundError)
        assert result.error.code == ErrorCode.PRINCIPAL_NOT_FOUND


@pytest.mark.unit
class TestAdminApproval:
    async def test_approval_notifies_principal_once(self, workflows, seed_principal, notifier):
        member = await seed_principal(approved=False, first_name="Ada")

        first = await workflows.set_admin_approval(member.id, True)
        second = await workflows.set_admin_approval(member.id, True)

        assert first.value.notified is True
        assert second.value.notified is False
        notifier.send_account_approved.assert_awaited_once_with("member@example.com", "Ada")

    async def test_revocation_clears_without_notifying(self, workflows, seed_principal, notifier, store):
        member = await seed_principal(approved=True)

        result = await workflows.set_admin_approval(member.id, False)

        assert result.value.approved is False
        assert result.value.notified is False
        notifier.send_account_approved.assert_not_awaited()
        record = await store.credentials.find_by_principal_id(member.id)
        assert record.admin_approved_at is None

    async def test_synchronous_notifier_failure_keeps_approval(
        self, workflows, seed_principal, notifier, store
    ):
        member = await seed_principal(approved=False)
        notifier.send_account_approved = Mock(side_effect=RuntimeError("sync notifier"))

        result = await workflows.set_admin_approval(member.id, True)

        assert isinstance(result, Success)
        assert result.value.notified is False
        record = await store.credentials.find_by_principal_id(member.id)
        assert record.admin_approved_at is not None

    async def test_unknown_principal(self, workflows):
        result = await workflows.set_admin_approval(uuid7(), True)
        assert result.error.code == ErrorCode.PRINCIPAL_NOT_FOUND


@pytest.mark.unit
class TestSetActive:
    @pytest.mark.parametrize("active", [True, False])
    async def test_flag_flip_is_idempotent(self, workflows, seed_principal, store, active):
        member = await seed_principal()

        await workflows.set_active(member.id, active)
        result = await workflows.set_active(member.id, active)

        assert result.value.active is active
        record = await store.credentials.find_by_principal_id(member.id)
        assert record.is_active is active

    async def test_unknown_principal(self, workflows):
        result = await workflows.set_active(uuid7(), False)
        assert result.error.code == ErrorCode.PRINCIPAL_NOT_FOUND


@pytest.mark.unit
class TestRoleCatalog:
    async def test_list_roles_includes_admin(self, workflows):
        result = await workflows.list_roles()
        assert result.value == [RoleDefinition(role="ADMIN", description=None, is_system=True)]

    async def test_create_role(self, workflows):
        result = await workflows.create_role("team lead", "Leads a team")

        assert result.value == RoleDefinition(
            role="TEAM_LEAD", description="Leads a team", is_system=False
        )

    async def test_remove_admin_always_false(self, workflows):
        await workflows.list_roles()

        assert await workflows.remove_role("ADMIN") == Success(value=False)
        roles = (await workflows.list_roles()).value
        assert "ADMIN" in [r.role for r in roles]

    async def test_remove_regular_role(self, workflows):
        await workflows.create_role("coach")
        assert await workflows.remove_role("Coach") == Success(value=True)
        assert await workflows.remove_role("Coach") == Success(value=False)


@pytest.mark.unit
class TestPrincipalRoles:
    async def test_set_roles_normalizes_and_dedupes(self, workflows, seed_principal):
        member = await seed_principal()

        result = await workflows.set_principal_roles(
            member.id, ["coach", " Coach ", "administrator"]
        )

        assert result.value.roles == ["ADMIN", "COACH"]
        assert (await workflows.get_principal_roles(member.id)).value.roles == [
            "ADMIN",
            "COACH",
        ]

    async def test_set_roles_auto_creates_catalog_entries(self, workflows, seed_principal):
        member = await seed_principal()

        await workflows.set_principal_roles(member.id, ["scout"])

        roles = (await workflows.list_roles()).value
        assert [r.role for r in roles] == ["ADMIN", "SCOUT"]

    async def test_set_roles_invalid_name(self, workflows, seed_principal):
        member = await seed_principal()

        result = await workflows.set_principal_roles(member.id, ["ok", "not ok!"])

        assert result.error.code == ErrorCode.INVALID_ROLE_NAME
        assert (await workflows.get_principal_roles(member.id)).value.roles == []

    async def test_assign_and_remove_single_role(self, workflows, seed_principal):
        member = await seed_principal()

        await workflows.assign_role_to_principal(member.id, "coach")
        await workflows.assign_role_to_principal(member.id, "COACH")
        await workflows.assign_role_to_principal(member.id, "member")
        result = await workflows.remove_role_from_principal(member.id, "coach")

        assert result.value.roles == ["MEMBER"]

    async def test_remove_role_not_held_is_noop(self, workflows, seed_principal):
        member = await seed_principal()
        await workflows.assign_role_to_principal(member.id, "member")

        result = await workflows.remove_role_from_principal(member.id, "coach")

        assert result.value.roles == ["MEMBER"]

    @pytest.mark.parametrize(
        "call",
        [
            lambda w, pid: w.get_principal_roles(pid),
            lambda w, pid: w.set_principal_roles(pid, ["coach"]),
            lambda w, pid: w.assign_role_to_principal(pid, "coach"),
            lambda w, pid: w.remove_role_from_principal(pid, "coach"),
        ],
    )
    async def test_unknown_principal(self, workflows, call):
        result = await call(workflows, uuid7())

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PRINCIPAL_NOT_FOUND


@pytest.mark.unit
class TestAdminGuard:
    def test_admin_passes(self, workflows):
        assert workflows.require_admin(["coach", "administrator"]) == Success(value=None)

    def test_non_admin_denied(self, workflows):
        result = workflows.require_admin(["coach"])

        assert isinstance(result.error, AuthorizationError)
        assert result.error.code == ErrorCode.PERMISSION_DENIED
        assert result.error.required_role == "ADMIN"

    async def test_list_admin_emails(self, workflows, seed_principal, admin):
        second = await seed_principal("another@example.com")
        await workflows.assign_role_to_principal(second.id, "admin")

        assert await workflows.list_admin_emails() == [
            "another@example.com",
            "boss@example.com",
        ]
