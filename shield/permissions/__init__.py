"""
Shield Permissions - Public API
===============================
"""

from shield.permissions.catalog import PermissionCatalog
from shield.permissions.constants import (
    BUCKET_CUSTOM,
    BUCKET_PAGES,
    BUCKET_RELATIONS,
    BUCKET_RESOURCES,
    BUCKET_WIDGETS,
    DEFAULT_RELATION_ACTIONS,
    DEFAULT_RESOURCE_ACTIONS,
)
from shield.permissions.errors import InvalidSlugError, MalformedKeyError, ShieldError
from shield.permissions.keys import (
    ParsedKey,
    format_entity_key,
    format_relation_key,
    format_resource_key,
    owner_slug_from_identity,
    parse_key,
    relation_slug_for,
)
from shield.permissions.models import (
    CatalogSection,
    PageDescriptor,
    RelationDescriptor,
    ResourceDescriptor,
    ResourceSection,
    Role,
    User,
    WidgetDescriptor,
)
from shield.permissions.provider import (
    InMemoryPermissionStore,
    PermissionStore,
    seed_permissions,
)
from shield.permissions.registry import InMemoryResourceRegistry, ResourceRegistry
from shield.permissions.resolver import AuthorizationResolver
from shield.permissions.settings import ShieldSettings


def __getattr__(name: str):
    if name == "DbPermissionStore":
        from shield.permissions.db_provider import DbPermissionStore

        return DbPermissionStore
    if name == "PanelAccessGate":
        from shield.permissions.panel import PanelAccessGate

        return PanelAccessGate
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "BUCKET_RESOURCES",
    "BUCKET_RELATIONS",
    "BUCKET_PAGES",
    "BUCKET_WIDGETS",
    "BUCKET_CUSTOM",
    "DEFAULT_RESOURCE_ACTIONS",
    "DEFAULT_RELATION_ACTIONS",
    "ShieldError",
    "InvalidSlugError",
    "MalformedKeyError",
    "ParsedKey",
    "format_resource_key",
    "format_relation_key",
    "format_entity_key",
    "parse_key",
    "relation_slug_for",
    "owner_slug_from_identity",
    "ResourceDescriptor",
    "RelationDescriptor",
    "PageDescriptor",
    "WidgetDescriptor",
    "Role",
    "User",
    "CatalogSection",
    "ResourceSection",
    "ResourceRegistry",
    "InMemoryResourceRegistry",
    "PermissionStore",
    "InMemoryPermissionStore",
    "DbPermissionStore",
    "seed_permissions",
    "PermissionCatalog",
    "AuthorizationResolver",
    "PanelAccessGate",
    "ShieldSettings",
]
