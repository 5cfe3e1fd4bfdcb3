"""
Shield Permissions - Settings
=============================
Reads the SHIELD dict from Django settings and merges it over defaults.

    SHIELD = {
        "relation_managers_enabled": True,
        "panel_user_enabled": True,
        "custom_permissions": ["send_invite"],
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from django.core.exceptions import ImproperlyConfigured

from shield.permissions.constants import (
    BUCKET_CUSTOM,
    BUCKET_PAGES,
    BUCKET_RESOURCES,
    BUCKET_WIDGETS,
    DEFAULT_GUARD_NAME,
    DEFAULT_PAGE_PREFIX,
    DEFAULT_PANEL_USER_ROLE,
    DEFAULT_RELATION_ACTIONS,
    DEFAULT_RESOURCE_ACTIONS,
    DEFAULT_SUPER_ADMIN_ROLE,
    DEFAULT_WIDGET_PREFIX,
    RELATION_SEPARATOR,
)

SETTINGS_NAME = "SHIELD"

_ENTITY_KEYS = (BUCKET_RESOURCES, BUCKET_PAGES, BUCKET_WIDGETS, "custom_permissions")

_BOOL_KEYS = (
    "relation_managers_enabled",
    "localized_labels",
    "simple_resource_permission_view",
    "panel_user_enabled",
)
_NAME_KEYS = (
    "super_admin_role",
    "panel_user_role",
    "guard_name",
    "page_permission_prefix",
    "widget_permission_prefix",
)
_PREFIX_LIST_KEYS = (
    "resource_permission_prefixes",
    "relation_manager_permission_prefixes",
)


def _default_entities() -> dict[str, bool]:
    return {name: True for name in _ENTITY_KEYS}


@dataclass(frozen=True)
class ShieldSettings:
    relation_managers_enabled: bool = False
    localized_labels: bool = False
    simple_resource_permission_view: bool = False
    panel_user_enabled: bool = False
    super_admin_role: str = DEFAULT_SUPER_ADMIN_ROLE
    panel_user_role: str = DEFAULT_PANEL_USER_ROLE
    guard_name: str = DEFAULT_GUARD_NAME
    resource_permission_prefixes: tuple[str, ...] = DEFAULT_RESOURCE_ACTIONS
    relation_manager_permission_prefixes: tuple[str, ...] = DEFAULT_RELATION_ACTIONS
    page_permission_prefix: str = DEFAULT_PAGE_PREFIX
    widget_permission_prefix: str = DEFAULT_WIDGET_PREFIX
    entities: dict[str, bool] = field(default_factory=_default_entities)
    custom_permissions: tuple[str, ...] = ()

    def entity_enabled(self, bucket: str) -> bool:
        if bucket == BUCKET_CUSTOM:
            bucket = "custom_permissions"
        return self.entities.get(bucket, True)

    def with_overrides(self, **overrides: Any) -> "ShieldSettings":
        return replace(self, **overrides)

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "ShieldSettings":
        values = dict(values or {})
        known = {f for f in cls.__dataclass_fields__}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ImproperlyConfigured(
                f"{SETTINGS_NAME} has unknown keys: {unknown}. "
                f"Valid keys: {sorted(known)}"
            )

        kwargs: dict[str, Any] = {}
        for key in _BOOL_KEYS:
            if key in values:
                if not isinstance(values[key], bool):
                    raise ImproperlyConfigured(f"{SETTINGS_NAME}['{key}'] must be a bool.")
                kwargs[key] = values[key]

        for key in _NAME_KEYS:
            if key in values:
                kwargs[key] = _clean_name(values[key], key=key)

        for key in _PREFIX_LIST_KEYS:
            if key in values:
                prefixes = _clean_list(values[key], key=key)
                if not prefixes:
                    raise ImproperlyConfigured(
                        f"{SETTINGS_NAME}['{key}'] must contain at least one prefix."
                    )
                kwargs[key] = prefixes

        if "custom_permissions" in values:
            kwargs["custom_permissions"] = _clean_list(
                values["custom_permissions"],
                key="custom_permissions",
                allow_separator=True,
            )

        if "entities" in values:
            entities = values["entities"]
            if not isinstance(entities, Mapping):
                raise ImproperlyConfigured(f"{SETTINGS_NAME}['entities'] must be a dict.")
            merged = _default_entities()
            for name, enabled in entities.items():
                if name not in merged:
                    raise ImproperlyConfigured(
                        f"{SETTINGS_NAME}['entities'] has unknown entity '{name}'. "
                        f"Valid entities: {sorted(merged)}"
                    )
                if not isinstance(enabled, bool):
                    raise ImproperlyConfigured(
                        f"{SETTINGS_NAME}['entities']['{name}'] must be a bool."
                    )
                merged[name] = enabled
            kwargs["entities"] = merged

        return cls(**kwargs)

    @classmethod
    def from_django_settings(cls) -> "ShieldSettings":
        from django.conf import settings

        return cls.from_mapping(getattr(settings, SETTINGS_NAME, None))


def _clean_name(value: Any, *, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ImproperlyConfigured(f"{SETTINGS_NAME}['{key}'] must be a non-empty string.")
    cleaned = value.strip()
    if RELATION_SEPARATOR in cleaned:
        raise ImproperlyConfigured(
            f"{SETTINGS_NAME}['{key}'] must not contain '{RELATION_SEPARATOR}'."
        )
    return cleaned


def _clean_list(value: Any, *, key: str, allow_separator: bool = False) -> tuple[str, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ImproperlyConfigured(f"{SETTINGS_NAME}['{key}'] must be a list of strings.")
    cleaned: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ImproperlyConfigured(
                f"{SETTINGS_NAME}['{key}'] values must be non-empty strings."
            )
        item = item.strip()
        if not allow_separator and RELATION_SEPARATOR in item:
            raise ImproperlyConfigured(
                f"{SETTINGS_NAME}['{key}'] value '{item}' must not contain "
                f"'{RELATION_SEPARATOR}'."
            )
        if item not in cleaned:
            cleaned.append(item)
    return tuple(cleaned)
