"""
Shield Permissions - Permission Catalog
=======================================
Enumerates the universe of permission keys from current registrations
and groups them into (key -> label) options for role editing.

Buckets:
    resources  {action}_{resource}
    relations  every key containing '__', whichever collection produced it
    pages      {page_prefix}_{PageBasename}
    widgets    {widget_prefix}_{WidgetBasename}
    custom     free-form keys without '__'

The catalog is recomputed on every call; registrations are static per
deployment and enumeration is bounded by resources x actions.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from shield.permissions.constants import (
    BUCKET_CUSTOM,
    BUCKET_PAGES,
    BUCKET_RELATIONS,
    BUCKET_RESOURCES,
    BUCKET_WIDGETS,
)
from shield.permissions.errors import MalformedKeyError
from shield.permissions.keys import (
    format_entity_key,
    format_relation_key,
    format_resource_key,
    headline,
    is_relation_key,
    is_relation_key_of,
    parse_key,
    relation_label,
)
from shield.permissions.models import (
    CatalogSection,
    PageDescriptor,
    RelationDescriptor,
    ResourceDescriptor,
    ResourceSection,
    WidgetDescriptor,
)
from shield.permissions.provider import PermissionStore
from shield.permissions.registry import ResourceRegistry
from shield.permissions.settings import ShieldSettings

logger = logging.getLogger("shield.catalog")


def _unique(keys: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for key in keys:
        seen.setdefault(key, None)
    return tuple(seen)


class PermissionCatalog:
    """
    Permission key enumeration over a resource registry.

    When a store is given, relation grouping reads the persisted keys
    (what administrators can actually grant); otherwise it groups the
    keys this catalog enumerates.
    """

    def __init__(
        self,
        registry: ResourceRegistry,
        settings: ShieldSettings,
        store: Optional[PermissionStore] = None,
    ):
        self._registry = registry
        self._settings = settings
        self._store = store

    # ══════════════════════════════════════════════════════════
    # ENUMERATION
    # ══════════════════════════════════════════════════════════

    def resource_actions(self, resource: ResourceDescriptor) -> tuple[str, ...]:
        return resource.permission_prefixes or self._settings.resource_permission_prefixes

    def relation_actions(self, relation: RelationDescriptor) -> tuple[str, ...]:
        return relation.actions or self._settings.relation_manager_permission_prefixes

    def enumerate_resource_permissions(
        self,
        resources: Optional[Sequence[ResourceDescriptor]] = None,
    ) -> tuple[str, ...]:
        if resources is None:
            resources = self._registry.list_resources()
        keys: list[str] = []
        for resource in sorted(resources, key=lambda r: r.sort_key()):
            for action in self.resource_actions(resource):
                keys.append(format_resource_key(action, resource.slug))
        return tuple(keys)

    def enumerate_relation_permissions(
        self,
        relations: Optional[Sequence[RelationDescriptor]] = None,
    ) -> tuple[str, ...]:
        if not self._settings.relation_managers_enabled:
            return tuple()
        if relations is None:
            relations = self._registry.list_relation_managers()
        keys: list[str] = []
        for relation in sorted(relations, key=lambda r: r.sort_key()):
            for action in self.relation_actions(relation):
                keys.append(
                    format_relation_key(
                        action,
                        relation.owner_resource_slug,
                        relation.identity,
                    )
                )
        return tuple(keys)

    def enumerate_page_permissions(
        self,
        pages: Optional[Sequence[PageDescriptor]] = None,
    ) -> tuple[str, ...]:
        if pages is None:
            pages = self._registry.list_pages()
        prefix = self._settings.page_permission_prefix
        return _unique(format_entity_key(prefix, page.identity) for page in pages)

    def enumerate_widget_permissions(
        self,
        widgets: Optional[Sequence[WidgetDescriptor]] = None,
    ) -> tuple[str, ...]:
        if widgets is None:
            widgets = self._registry.list_widgets()
        prefix = self._settings.widget_permission_prefix
        return _unique(format_entity_key(prefix, widget.identity) for widget in widgets)

    def _declared_custom_permissions(
        self,
        custom_permissions: Optional[Sequence[str]] = None,
    ) -> tuple[str, ...]:
        if custom_permissions is None:
            custom_permissions = (
                tuple(self._registry.list_custom_permissions())
                + self._settings.custom_permissions
            )
        return _unique(custom_permissions)

    def enumerate_custom_permissions(
        self,
        custom_permissions: Optional[Sequence[str]] = None,
    ) -> tuple[str, ...]:
        """Custom keys containing '__' belong to the relation bucket."""
        return tuple(
            key
            for key in self._declared_custom_permissions(custom_permissions)
            if not is_relation_key(key)
        )

    def enumerate_relation_bucket(self) -> tuple[str, ...]:
        declared_relations = (
            key for key in self._declared_custom_permissions() if is_relation_key(key)
        )
        return _unique(
            self.enumerate_relation_permissions() + tuple(declared_relations)
        )

    def all_permissions(self) -> tuple[str, ...]:
        """Full catalog: every enabled bucket, each key exactly once."""
        keys: list[str] = []
        if self._settings.entity_enabled(BUCKET_RESOURCES):
            keys.extend(self.enumerate_resource_permissions())
            keys.extend(self.enumerate_relation_bucket())
        if self._settings.entity_enabled(BUCKET_PAGES):
            keys.extend(self.enumerate_page_permissions())
        if self._settings.entity_enabled(BUCKET_WIDGETS):
            keys.extend(self.enumerate_widget_permissions())
        if self._settings.entity_enabled(BUCKET_CUSTOM):
            keys.extend(self.enumerate_custom_permissions())
            # Declared '__' keys stay relation-scoped but are still seeded.
            keys.extend(
                key for key in self._declared_custom_permissions() if is_relation_key(key)
            )

        catalog = _unique(keys)
        logger.debug(
            f"Catalog enumerated: {len(catalog)} keys "
            f"({len(keys) - len(catalog)} duplicates dropped)"
        )
        return catalog

    def classify(self, key: str) -> str:
        if is_relation_key(key):
            return BUCKET_RELATIONS
        if key in self.enumerate_resource_permissions():
            return BUCKET_RESOURCES
        if key in self.enumerate_page_permissions():
            return BUCKET_PAGES
        if key in self.enumerate_widget_permissions():
            return BUCKET_WIDGETS
        return BUCKET_CUSTOM

    # ══════════════════════════════════════════════════════════
    # GROUPING
    # ══════════════════════════════════════════════════════════

    def group_relation_permissions_by_owner(
        self,
        keys: Iterable[str],
        owners: Optional[Iterable[str]] = None,
    ) -> dict[str, dict[str, str]]:
        """
        Group relation-scoped keys by owning resource slug.

        Labels read "{Action} {Relation}", e.g. "View Payment Methods".
        A key matching several owners goes to the longest slug. Malformed
        keys are logged and skipped.
        """
        if owners is None:
            owners = (resource.slug for resource in self._registry.list_resources())
        ordered_owners = sorted(set(owners), key=lambda slug: (-len(slug), slug))

        grouped: dict[str, dict[str, str]] = {}
        for key in keys:
            if not is_relation_key(key):
                continue
            owner = next(
                (slug for slug in ordered_owners if is_relation_key_of(key, slug)),
                None,
            )
            if owner is None:
                logger.debug(f"Relation key '{key}' matches no registered resource")
                continue
            try:
                parsed = parse_key(key, resource_slug=owner)
            except MalformedKeyError as exc:
                logger.warning(f"Skipping malformed permission key: {exc}")
                continue
            grouped.setdefault(owner, {})[key] = relation_label(
                parsed.action,
                parsed.relation_slug,
            )

        return {owner: grouped[owner] for owner in sorted(grouped)}

    # ══════════════════════════════════════════════════════════
    # OPTIONS
    # ══════════════════════════════════════════════════════════

    def _label(self, key: str, localized: str) -> str:
        return localized if self._settings.localized_labels else key

    def resource_permission_options(self, resource: ResourceDescriptor) -> dict[str, str]:
        options: dict[str, str] = {}
        for action in self.resource_actions(resource):
            key = format_resource_key(action, resource.slug)
            options[key] = self._label(key, headline(action))
        return options

    def relation_permission_options(self, resource_slug: str) -> dict[str, str]:
        if not self._settings.relation_managers_enabled:
            return {}
        if self._store is not None:
            keys = self._store.relation_permission_keys(resource_slug)
        else:
            keys = self.enumerate_relation_bucket()
        owners = {resource.slug for resource in self._registry.list_resources()}
        owners.add(resource_slug)
        grouped = self.group_relation_permissions_by_owner(keys, owners=owners)
        return grouped.get(resource_slug, {})

    def relation_manager_permission_options(self) -> dict[str, str]:
        if self._store is not None:
            keys = [key for key in self._store.permission_keys() if is_relation_key(key)]
        else:
            keys = list(self.enumerate_relation_bucket())
        return {key: self._label(key, headline(key)) for key in keys}

    def all_resource_permission_options(self) -> dict[str, str]:
        options: dict[str, str] = {}
        for resource in self._registry.list_resources():
            options.update(self.resource_permission_options(resource))
        return options

    def page_options(self) -> dict[str, str]:
        prefix = self._settings.page_permission_prefix
        return {
            format_entity_key(prefix, page.identity): self._label(
                format_entity_key(prefix, page.identity),
                headline(page.basename),
            )
            for page in self._registry.list_pages()
        }

    def widget_options(self) -> dict[str, str]:
        prefix = self._settings.widget_permission_prefix
        return {
            format_entity_key(prefix, widget.identity): self._label(
                format_entity_key(prefix, widget.identity),
                headline(widget.basename),
            )
            for widget in self._registry.list_widgets()
        }

    def custom_permission_options(self) -> dict[str, str]:
        return {
            key: self._label(key, headline(key))
            for key in self.enumerate_custom_permissions()
        }

    def resource_sections(self) -> tuple[ResourceSection, ...]:
        sections: list[ResourceSection] = []
        for resource in self._registry.list_resources():
            sections.append(
                ResourceSection(
                    slug=resource.slug,
                    label=resource.display_model,
                    path=resource.fqcn,
                    options=self.resource_permission_options(resource),
                    relation_options=self.relation_permission_options(resource.slug),
                )
            )
        return tuple(sections)

    def sections(self) -> tuple[CatalogSection, ...]:
        """
        One section per enabled bucket, in tab order.

        The resources section is present whenever enabled; the others
        only when they have options.
        """
        sections: list[CatalogSection] = []

        if self._settings.entity_enabled(BUCKET_RESOURCES):
            if self._settings.simple_resource_permission_view:
                options = self.all_resource_permission_options()
            else:
                options = {}
                for section in self.resource_sections():
                    options.update(section.options)
                    options.update(section.relation_options)
            sections.append(CatalogSection(name=BUCKET_RESOURCES, options=options))

        for bucket, options in (
            (BUCKET_PAGES, self.page_options()),
            (BUCKET_WIDGETS, self.widget_options()),
            (BUCKET_CUSTOM, self.custom_permission_options()),
        ):
            if self._settings.entity_enabled(bucket) and options:
                sections.append(CatalogSection(name=bucket, options=options))

        return tuple(sections)
