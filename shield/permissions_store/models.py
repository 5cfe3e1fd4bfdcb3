"""
Shield Permissions Store - Relational Roles and Permissions
==========================================================
Permission rows are created by the seed/sync step; relation_slug is
stored as a first-class indexed column so relation lookups do not
depend on LIKE scans over permission names.
"""

from __future__ import annotations

from django.db import models


class Permission(models.Model):
    name = models.CharField(max_length=255)
    guard_name = models.CharField(max_length=64)
    relation_slug = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "shield_permissions"
        ordering = ["guard_name", "name", "id"]
        indexes = [
            models.Index(fields=["relation_slug"], name="idx_shield_perm_relation"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["name", "guard_name"],
                name="uq_shield_permission_name_guard",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.guard_name})"


class Role(models.Model):
    name = models.CharField(max_length=255)
    guard_name = models.CharField(max_length=64)
    permissions = models.ManyToManyField(
        Permission,
        through="RolePermission",
        related_name="roles",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shield_roles"
        ordering = ["guard_name", "name", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["name", "guard_name"],
                name="uq_shield_role_name_guard",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.guard_name})"


class RolePermission(models.Model):
    role = models.ForeignKey(
        Role,
        on_delete=models.CASCADE,
        related_name="role_permissions",
        db_column="role_id",
    )
    permission = models.ForeignKey(
        Permission,
        on_delete=models.CASCADE,
        related_name="role_permissions",
        db_column="permission_id",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "shield_role_permissions"
        ordering = ["role_id", "permission_id", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["role", "permission"],
                name="uq_shield_role_permission",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.role_id}:{self.permission_id}"


class UserRole(models.Model):
    user_id = models.CharField(max_length=255)
    role = models.ForeignKey(
        Role,
        on_delete=models.CASCADE,
        related_name="user_roles",
        db_column="role_id",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "shield_user_roles"
        ordering = ["user_id", "role_id", "id"]
        indexes = [
            models.Index(fields=["user_id"], name="idx_shield_user_role_user"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "role"],
                name="uq_shield_user_role",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}:{self.role_id}"
