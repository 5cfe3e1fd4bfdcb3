"""
Shield Permissions - Immutable Descriptors and Role/User Models
===============================================================
Descriptors are derived at startup from static registration metadata
and are never persisted. Role and User mirror persisted store rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from shield.permissions.constants import (
    DEFAULT_GUARD_NAME,
    RELATION_SEPARATOR,
)
from shield.permissions.errors import InvalidSlugError
from shield.permissions.keys import (
    class_basename,
    identity_path,
    relation_slug_for,
)


def _normalize_actions(actions, *, field_name: str) -> tuple[str, ...]:
    if not isinstance(actions, tuple):
        raise ValueError(f"{field_name} must be a tuple.")
    seen: list[str] = []
    for action in actions:
        if not isinstance(action, str) or not action:
            raise ValueError(f"{field_name} values must be non-empty strings.")
        if RELATION_SEPARATOR in action:
            raise InvalidSlugError(action, field_name)
        if action not in seen:
            seen.append(action)
    return tuple(seen)


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    One manageable entity type.

    permission_prefixes overrides the configured resource action list
    for this resource only; empty means "use the configured default".
    """

    slug: str
    display_model: str
    fqcn: str
    permission_prefixes: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.slug or not isinstance(self.slug, str):
            raise ValueError("slug must be a non-empty string.")
        if RELATION_SEPARATOR in self.slug:
            raise InvalidSlugError(self.slug, "resource_slug")
        if not self.display_model or not isinstance(self.display_model, str):
            raise ValueError("display_model must be a non-empty string.")
        if not self.fqcn or not isinstance(self.fqcn, str):
            raise ValueError("fqcn must be a non-empty string.")
        object.__setattr__(
            self,
            "permission_prefixes",
            _normalize_actions(self.permission_prefixes, field_name="permission_prefixes"),
        )

    def sort_key(self) -> tuple[str, str]:
        return (self.slug, self.fqcn)


@dataclass(frozen=True)
class RelationDescriptor:
    owner_resource_slug: str
    identity: str
    actions: tuple[str, ...] = ()
    relation_slug: str = field(init=False)

    def __post_init__(self):
        if not self.owner_resource_slug or not isinstance(self.owner_resource_slug, str):
            raise ValueError("owner_resource_slug must be a non-empty string.")
        if RELATION_SEPARATOR in self.owner_resource_slug:
            raise InvalidSlugError(self.owner_resource_slug, "owner_resource_slug")
        object.__setattr__(self, "identity", identity_path(self.identity))
        object.__setattr__(self, "relation_slug", relation_slug_for(self.identity))
        object.__setattr__(
            self,
            "actions",
            _normalize_actions(self.actions, field_name="actions"),
        )

    def sort_key(self) -> tuple[str, str, str]:
        return (self.owner_resource_slug, self.relation_slug, self.identity)


@dataclass(frozen=True)
class PageDescriptor:
    identity: str

    def __post_init__(self):
        object.__setattr__(self, "identity", identity_path(self.identity))
        if not self.identity:
            raise ValueError("identity must be a non-empty string.")

    @property
    def basename(self) -> str:
        return class_basename(self.identity)


@dataclass(frozen=True)
class WidgetDescriptor:
    identity: str

    def __post_init__(self):
        object.__setattr__(self, "identity", identity_path(self.identity))
        if not self.identity:
            raise ValueError("identity must be a non-empty string.")

    @property
    def basename(self) -> str:
        return class_basename(self.identity)


@dataclass(frozen=True)
class Role:
    name: str
    guard_name: str = DEFAULT_GUARD_NAME
    permissions: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")
        if not self.guard_name or not isinstance(self.guard_name, str):
            raise ValueError("guard_name must be a non-empty string.")
        if not isinstance(self.permissions, tuple):
            raise ValueError("permissions must be a tuple.")
        for permission in self.permissions:
            if not isinstance(permission, str) or not permission:
                raise ValueError("permission values must be non-empty strings.")
        object.__setattr__(self, "permissions", tuple(sorted(set(self.permissions))))


@dataclass(frozen=True)
class User:
    user_id: str

    def __post_init__(self):
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")


@dataclass(frozen=True)
class CatalogSection:
    """One catalog bucket as (key -> label) options."""

    name: str
    options: dict[str, str]

    @property
    def badge(self) -> int:
        return len(self.options)


@dataclass(frozen=True)
class ResourceSection:
    slug: str
    label: str
    path: str
    options: dict[str, str]
    relation_options: dict[str, str] = field(default_factory=dict)
