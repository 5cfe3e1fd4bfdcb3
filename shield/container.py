"""
Shield - Composition Root
=========================
Builds the catalog, resolver and panel gate once and hands them to
consumers explicitly. Nothing here is a global singleton.

Usage:
    registry = InMemoryResourceRegistry(resources=[...])
    shield = build_shield(registry)
    shield.resolver.authorize(user, "view", "member")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shield.permissions.catalog import PermissionCatalog
from shield.permissions.panel import PanelAccessGate
from shield.permissions.provider import PermissionStore, seed_permissions
from shield.permissions.registry import ResourceRegistry
from shield.permissions.resolver import AuthorizationResolver
from shield.permissions.settings import ShieldSettings


@dataclass(frozen=True)
class Shield:
    settings: ShieldSettings
    registry: ResourceRegistry
    store: PermissionStore
    catalog: PermissionCatalog
    resolver: AuthorizationResolver
    gate: PanelAccessGate

    def seed(self) -> int:
        """Create every catalog key in the store; safe to re-run."""
        return seed_permissions(self.store, self.catalog.all_permissions())


def build_shield(
    registry: ResourceRegistry,
    store: Optional[PermissionStore] = None,
    settings: Optional[ShieldSettings] = None,
) -> Shield:
    if settings is None:
        settings = ShieldSettings.from_django_settings()
    if store is None:
        from shield.permissions.db_provider import DbPermissionStore

        store = DbPermissionStore(guard_name=settings.guard_name)

    return Shield(
        settings=settings,
        registry=registry,
        store=store,
        catalog=PermissionCatalog(registry, settings, store=store),
        resolver=AuthorizationResolver(store, settings),
        gate=PanelAccessGate(store, settings),
    )
