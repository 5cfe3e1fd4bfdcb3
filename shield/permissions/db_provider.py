"""
Shield Permissions - DB-backed Store
====================================
Resolves roles, grants and assignments from the relational store.
Inserts rely on unique constraints (INSERT ... ON CONFLICT DO NOTHING)
rather than read-then-write, so concurrent seed runs cannot duplicate rows.
"""

from __future__ import annotations

import logging
from typing import Iterable

from django.db import transaction

from shield.permissions.constants import DEFAULT_GUARD_NAME, RELATION_SEPARATOR
from shield.permissions.keys import is_relation_key_of
from shield.permissions.models import Role

logger = logging.getLogger("shield.store")


def _relation_slug_of(key: str) -> str | None:
    _, separator, relation_slug = key.partition(RELATION_SEPARATOR)
    return relation_slug if separator and relation_slug else None


class DbPermissionStore:
    def __init__(self, guard_name: str = DEFAULT_GUARD_NAME):
        self._guard_name = guard_name

    def _to_role(self, row) -> Role:
        names = tuple(
            row.permissions.filter(guard_name=self._guard_name)
            .order_by("name")
            .values_list("name", flat=True)
        )
        return Role(name=row.name, guard_name=row.guard_name, permissions=names)

    def _role_row(self, name: str):
        from shield.permissions_store.models import Role as RoleRow

        return RoleRow.objects.filter(name=name, guard_name=self._guard_name).first()

    def role_has_permission(self, role_name: str, key: str) -> bool:
        from shield.permissions_store.models import RolePermission

        return RolePermission.objects.filter(
            role__name=role_name,
            role__guard_name=self._guard_name,
            permission__name=key,
            permission__guard_name=self._guard_name,
        ).exists()

    def user_roles(self, user_id: str) -> tuple[Role, ...]:
        if not isinstance(user_id, str) or not user_id.strip():
            return tuple()

        from shield.permissions_store.models import Role as RoleRow

        rows = (
            RoleRow.objects.filter(
                user_roles__user_id=user_id.strip(),
                guard_name=self._guard_name,
            )
            .order_by("name", "id")
            .distinct()
        )
        return tuple(self._to_role(row) for row in rows)

    def create_permission_if_absent(self, key: str) -> None:
        if not isinstance(key, str) or not key:
            raise ValueError("permission key must be a non-empty string.")

        from shield.permissions_store.models import Permission

        Permission.objects.bulk_create(
            [
                Permission(
                    name=key,
                    guard_name=self._guard_name,
                    relation_slug=_relation_slug_of(key),
                )
            ],
            ignore_conflicts=True,
        )

    def permission_keys(self) -> tuple[str, ...]:
        from shield.permissions_store.models import Permission

        return tuple(
            Permission.objects.filter(guard_name=self._guard_name)
            .order_by("name")
            .values_list("name", flat=True)
        )

    def relation_permission_keys(self, owner_resource_slug: str) -> tuple[str, ...]:
        from shield.permissions_store.models import Permission

        candidates = (
            Permission.objects.filter(
                guard_name=self._guard_name,
                relation_slug__isnull=False,
                name__contains=f"_{owner_resource_slug}{RELATION_SEPARATOR}",
            )
            .order_by("name")
            .values_list("name", flat=True)
        )
        return tuple(
            key for key in candidates if is_relation_key_of(key, owner_resource_slug)
        )

    def find_role(self, name: str) -> Role | None:
        row = self._role_row(name)
        if row is None:
            return None
        return self._to_role(row)

    def ensure_role(self, name: str) -> Role:
        if not isinstance(name, str) or not name:
            raise ValueError("role name must be a non-empty string.")

        from shield.permissions_store.models import Role as RoleRow

        row, created = RoleRow.objects.get_or_create(
            name=name,
            guard_name=self._guard_name,
        )
        if created:
            logger.info(f"Role created: {name} (guard: {self._guard_name})")
        return self._to_role(row)

    def assign_role(self, user_id: str, role_name: str) -> None:
        from shield.permissions_store.models import UserRole

        row = self._role_row(role_name)
        if row is None:
            raise ValueError(f"Role '{role_name}' does not exist.")
        UserRole.objects.bulk_create(
            [UserRole(user_id=user_id, role=row)],
            ignore_conflicts=True,
        )

    def remove_role(self, user_id: str, role_name: str) -> None:
        from shield.permissions_store.models import UserRole

        UserRole.objects.filter(
            user_id=user_id,
            role__name=role_name,
            role__guard_name=self._guard_name,
        ).delete()

    def sync_role_permissions(self, role_name: str, keys: Iterable[str]) -> Role:
        from shield.permissions_store.models import Permission, RolePermission

        wanted = sorted(set(keys))
        with transaction.atomic():
            row = self._role_row(role_name)
            if row is None:
                raise ValueError(f"Role '{role_name}' does not exist.")

            for key in wanted:
                self.create_permission_if_absent(key)

            permissions = list(
                Permission.objects.filter(
                    guard_name=self._guard_name,
                    name__in=wanted,
                )
            )
            RolePermission.objects.filter(role=row).exclude(
                permission__in=permissions
            ).delete()
            RolePermission.objects.bulk_create(
                [RolePermission(role=row, permission=p) for p in permissions],
                ignore_conflicts=True,
            )

        logger.info(
            f"Role permissions synced: {role_name} "
            f"({len(wanted)} permissions, guard: {self._guard_name})"
        )
        return self._to_role(row)
