"""In-memory store (reference adapter).

Implements every repository protocol over plain dictionaries. Used by the
test-suite and by hosts that want a non-durable engine.

Semantics mirror a relational store:
    - Reads return copies; credential state changes only through the
      field-targeted mutations
    - Creating a principal or credential record that already exists returns
      False; other unique constraints (pending verification token, role key,
      reset token) raise ValueError
    - ``revoke`` and ``mark_used`` are conditional updates that run without
      awaiting, so under asyncio only one caller can flip a given row

Usage:
    store = InMemoryStore()
    await store.principals.save(principal)
    services = build_services(store, notifier, settings)
"""

import copy
import itertools
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from uuid_extensions import uuid7

from gatehouse.domain.entities import CredentialRecord, Principal, Role
from gatehouse.domain.protocols import PasswordResetTokenData, RefreshTokenData


@dataclass
class _StoreState:
    principals: dict[UUID, Principal] = field(default_factory=dict)
    credentials: dict[UUID, CredentialRecord] = field(default_factory=dict)
    refresh_tokens: dict[UUID, RefreshTokenData] = field(default_factory=dict)
    refresh_token_sequence: dict[UUID, int] = field(default_factory=dict)
    reset_tokens: dict[UUID, PasswordResetTokenData] = field(default_factory=dict)
    roles: dict[UUID, Role] = field(default_factory=dict)
    assignments: dict[UUID, set[UUID]] = field(default_factory=dict)
    sequence: itertools.count = field(default_factory=itertools.count)


class InMemoryPrincipalRepository:
    """PrincipalRepository over the shared state."""

    def __init__(self, state: _StoreState) -> None:
        self._state = state

    async def find_by_id(self, principal_id: UUID) -> Principal | None:
        principal = self._state.principals.get(principal_id)
        return copy.copy(principal) if principal else None

    async def find_by_email(self, email: str) -> Principal | None:
        for principal in self._state.principals.values():
            if principal.email == email:
                return copy.copy(principal)
        return None

    async def save(self, principal: Principal) -> bool:
        for existing in self._state.principals.values():
            if existing.email == principal.email or existing.id == principal.id:
                return False
        self._state.principals[principal.id] = copy.copy(principal)
        return True

    async def find_active_with_role(self, role_key: str) -> list[Principal]:
        role_ids = {
            role.id for role in self._state.roles.values() if role.key == role_key
        }
        found: list[Principal] = []
        for principal_id, assigned in self._state.assignments.items():
            if not assigned & role_ids:
                continue
            record = self._state.credentials.get(principal_id)
            principal = self._state.principals.get(principal_id)
            if principal is None or record is None or not record.is_active:
                continue
            found.append(copy.copy(principal))
        return sorted(found, key=lambda p: p.email)


class InMemoryCredentialRepository:
    """CredentialRepository over the shared state.

    Field-targeted mutations apply the entity transition to the stored row
    without awaiting, so each is atomic under asyncio.
    """

    def __init__(self, state: _StoreState) -> None:
        self._state = state

    async def find_by_principal_id(self, principal_id: UUID) -> CredentialRecord | None:
        record = self._state.credentials.get(principal_id)
        return copy.copy(record) if record else None

    async def find_by_verification_token(self, token: str) -> CredentialRecord | None:
        record = self._holding_token(token)
        return copy.copy(record) if record else None

    async def save(self, record: CredentialRecord) -> bool:
        if record.principal_id in self._state.credentials:
            return False
        if (
            record.email_verification_token is not None
            and self._holding_token(record.email_verification_token) is not None
        ):
            raise ValueError("Verification token must be unique")
        self._state.credentials[record.principal_id] = copy.copy(record)
        return True

    async def update_password_hash(self, principal_id: UUID, password_hash: str) -> bool:
        record = self._state.credentials.get(principal_id)
        if record is None:
            return False
        record.password_hash = password_hash
        return True

    async def set_active(self, principal_id: UUID, active: bool) -> bool:
        record = self._state.credentials.get(principal_id)
        if record is None:
            return False
        record.is_active = active
        return True

    async def set_admin_approval(
        self, principal_id: UUID, approved: bool, at: datetime
    ) -> bool:
        record = self._state.credentials.get(principal_id)
        if record is None:
            return False
        return record.set_admin_approval(approved, at)

    async def mark_email_verified(self, principal_id: UUID, at: datetime) -> bool:
        record = self._state.credentials.get(principal_id)
        if record is None:
            return False
        record.mark_email_verified(at)
        return True

    async def consume_verification_token(self, token: str, at: datetime) -> UUID | None:
        # Conditional update: WHERE email_verification_token = :token
        record = self._holding_token(token)
        if record is None:
            return None
        record.mark_email_verified(at)
        return record.principal_id

    def _holding_token(self, token: str) -> CredentialRecord | None:
        for record in self._state.credentials.values():
            if record.email_verification_token == token:
                return record
        return None


class InMemoryRefreshTokenRepository:
    """RefreshTokenRepository over the shared state."""

    def __init__(self, state: _StoreState) -> None:
        self._state = state

    async def save(
        self,
        principal_id: UUID,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> RefreshTokenData:
        data = RefreshTokenData(
            id=uuid7(),
            principal_id=principal_id,
            token_hash=token_hash,
            expires_at=expires_at,
            revoked_at=None,
            created_at=created_at,
        )
        self._state.refresh_tokens[data.id] = data
        self._state.refresh_token_sequence[data.id] = next(self._state.sequence)
        return copy.copy(data)

    async def find_recent_unrevoked(self, limit: int) -> list[RefreshTokenData]:
        sequence = self._state.refresh_token_sequence
        unrevoked = [
            t for t in self._state.refresh_tokens.values() if t.revoked_at is None
        ]
        unrevoked.sort(key=lambda t: (t.created_at, sequence[t.id]), reverse=True)
        return [copy.copy(t) for t in unrevoked[:limit]]

    async def revoke(self, token_id: UUID, revoked_at: datetime) -> bool:
        # Conditional update: WHERE id = :id AND revoked_at IS NULL
        data = self._state.refresh_tokens.get(token_id)
        if data is None or data.revoked_at is not None:
            return False
        data.revoked_at = revoked_at
        return True

    async def revoke_all_for_principal(
        self, principal_id: UUID, revoked_at: datetime
    ) -> int:
        count = 0
        for data in self._state.refresh_tokens.values():
            if data.principal_id == principal_id and data.revoked_at is None:
                data.revoked_at = revoked_at
                count += 1
        return count


class InMemoryPasswordResetTokenRepository:
    """PasswordResetTokenRepository over the shared state."""

    def __init__(self, state: _StoreState) -> None:
        self._state = state

    async def save(
        self,
        principal_id: UUID,
        token: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> PasswordResetTokenData:
        if any(t.token == token for t in self._state.reset_tokens.values()):
            raise ValueError("Reset token must be unique")
        data = PasswordResetTokenData(
            id=uuid7(),
            principal_id=principal_id,
            token=token,
            expires_at=expires_at,
            used_at=None,
            created_at=created_at,
        )
        self._state.reset_tokens[data.id] = data
        return copy.copy(data)

    async def find_by_token(self, token: str) -> PasswordResetTokenData | None:
        for data in self._state.reset_tokens.values():
            if data.token == token:
                return copy.copy(data)
        return None

    async def mark_used(self, token_id: UUID, used_at: datetime) -> bool:
        # Conditional update: WHERE id = :id AND used_at IS NULL
        data = self._state.reset_tokens.get(token_id)
        if data is None or data.used_at is not None:
            return False
        data.used_at = used_at
        return True


class InMemoryRoleRepository:
    """RoleRepository over the shared state."""

    def __init__(self, state: _StoreState) -> None:
        self._state = state

    async def list_all(self) -> list[Role]:
        return self._sorted(self._state.roles.values())

    async def find_by_key(self, key: str) -> Role | None:
        for role in self._state.roles.values():
            if role.key == key:
                return copy.copy(role)
        return None

    async def find_by_keys(self, keys: Sequence[str]) -> list[Role]:
        wanted = set(keys)
        return self._sorted(r for r in self._state.roles.values() if r.key in wanted)

    async def find_by_ids(self, role_ids: Sequence[UUID]) -> list[Role]:
        wanted = set(role_ids)
        return self._sorted(r for r in self._state.roles.values() if r.id in wanted)

    async def save(self, role: Role) -> None:
        for existing in self._state.roles.values():
            if existing.key == role.key and existing.id != role.id:
                raise ValueError("Role key must be unique")
        self._state.roles[role.id] = copy.copy(role)

    async def save_many(self, roles: Sequence[Role]) -> None:
        for role in roles:
            await self.save(role)

    async def delete(self, role_id: UUID) -> None:
        self._state.roles.pop(role_id, None)

    @staticmethod
    def _sorted(roles) -> list[Role]:
        return [copy.copy(r) for r in sorted(roles, key=lambda r: r.key)]


class InMemoryRoleAssignmentRepository:
    """RoleAssignmentRepository over the shared state."""

    def __init__(self, state: _StoreState) -> None:
        self._state = state

    async def find_role_ids(self, principal_id: UUID) -> list[UUID]:
        return list(self._state.assignments.get(principal_id, set()))

    async def replace_for_principal(
        self, principal_id: UUID, role_ids: Sequence[UUID]
    ) -> None:
        if role_ids:
            self._state.assignments[principal_id] = set(role_ids)
        else:
            self._state.assignments.pop(principal_id, None)

    async def delete_for_role(self, role_id: UUID) -> None:
        for assigned in self._state.assignments.values():
            assigned.discard(role_id)


class InMemoryStore:
    """All engine repositories over one shared in-memory state.

    Attributes:
        principals: PrincipalRepository
        credentials: CredentialRepository
        refresh_tokens: RefreshTokenRepository
        reset_tokens: PasswordResetTokenRepository
        roles: RoleRepository
        role_assignments: RoleAssignmentRepository
    """

    def __init__(self) -> None:
        state = _StoreState()
        self.principals = InMemoryPrincipalRepository(state)
        self.credentials = InMemoryCredentialRepository(state)
        self.refresh_tokens = InMemoryRefreshTokenRepository(state)
        self.reset_tokens = InMemoryPasswordResetTokenRepository(state)
        self.roles = InMemoryRoleRepository(state)
        self.role_assignments = InMemoryRoleAssignmentRepository(state)
