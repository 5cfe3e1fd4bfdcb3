"""
Shield Permissions - Store Protocol and In-Memory Store
=======================================================
Role -> permission keys, user -> roles.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from shield.permissions.constants import DEFAULT_GUARD_NAME
from shield.permissions.keys import is_relation_key_of
from shield.permissions.models import Role


class PermissionStore(Protocol):
    def role_has_permission(self, role_name: str, key: str) -> bool:
        ...

    def user_roles(self, user_id: str) -> tuple[Role, ...]:
        ...

    def create_permission_if_absent(self, key: str) -> None:
        ...

    def permission_keys(self) -> tuple[str, ...]:
        ...

    def relation_permission_keys(self, owner_resource_slug: str) -> tuple[str, ...]:
        ...

    def find_role(self, name: str) -> Role | None:
        ...

    def ensure_role(self, name: str) -> Role:
        ...

    def assign_role(self, user_id: str, role_name: str) -> None:
        ...

    def remove_role(self, user_id: str, role_name: str) -> None:
        ...

    def sync_role_permissions(self, role_name: str, keys: Iterable[str]) -> Role:
        ...


def seed_permissions(store: PermissionStore, keys: Iterable[str]) -> int:
    """Idempotently create every key; returns how many keys were offered."""
    count = 0
    for key in keys:
        store.create_permission_if_absent(key)
        count += 1
    return count


class InMemoryPermissionStore:
    """
    Deterministic in-memory store used for bootstrap/tests.
    """

    def __init__(
        self,
        roles: Iterable[Role] | None = None,
        assignments: Iterable[tuple[str, str]] | None = None,
        guard_name: str = DEFAULT_GUARD_NAME,
    ):
        self._guard_name = guard_name
        self._permissions: set[str] = set()
        self._role_permissions: dict[str, set[str]] = {}
        self._user_roles: dict[str, set[str]] = {}

        for role in roles or ():
            if role.name in self._role_permissions:
                raise ValueError(f"Duplicate role name '{role.name}'.")
            self._role_permissions[role.name] = set(role.permissions)
            self._permissions.update(role.permissions)

        for user_id, role_name in assignments or ():
            self.assign_role(user_id, role_name)

    def _role(self, name: str) -> Role:
        return Role(
            name=name,
            guard_name=self._guard_name,
            permissions=tuple(self._role_permissions[name]),
        )

    def role_has_permission(self, role_name: str, key: str) -> bool:
        return key in self._role_permissions.get(role_name, ())

    def user_roles(self, user_id: str) -> tuple[Role, ...]:
        names = sorted(self._user_roles.get(user_id, ()))
        return tuple(self._role(name) for name in names)

    def create_permission_if_absent(self, key: str) -> None:
        if not isinstance(key, str) or not key:
            raise ValueError("permission key must be a non-empty string.")
        self._permissions.add(key)

    def permission_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._permissions))

    def relation_permission_keys(self, owner_resource_slug: str) -> tuple[str, ...]:
        return tuple(
            key
            for key in sorted(self._permissions)
            if is_relation_key_of(key, owner_resource_slug)
        )

    def find_role(self, name: str) -> Role | None:
        if name not in self._role_permissions:
            return None
        return self._role(name)

    def ensure_role(self, name: str) -> Role:
        if not isinstance(name, str) or not name:
            raise ValueError("role name must be a non-empty string.")
        self._role_permissions.setdefault(name, set())
        return self._role(name)

    def assign_role(self, user_id: str, role_name: str) -> None:
        if role_name not in self._role_permissions:
            raise ValueError(f"Role '{role_name}' does not exist.")
        self._user_roles.setdefault(user_id, set()).add(role_name)

    def remove_role(self, user_id: str, role_name: str) -> None:
        self._user_roles.get(user_id, set()).discard(role_name)

    def sync_role_permissions(self, role_name: str, keys: Iterable[str]) -> Role:
        if role_name not in self._role_permissions:
            raise ValueError(f"Role '{role_name}' does not exist.")
        granted = set()
        for key in keys:
            self.create_permission_if_absent(key)
            granted.add(key)
        self._role_permissions[role_name] = granted
        return self._role(role_name)
