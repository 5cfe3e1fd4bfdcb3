"""
Shield Permissions - Resource Registry Protocol and In-Memory Registry
======================================================================
Static registration metadata the catalog enumerates from.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from shield.permissions.errors import InvalidSlugError
from shield.permissions.keys import Identity, identity_path, owner_slug_from_identity
from shield.permissions.models import (
    PageDescriptor,
    RelationDescriptor,
    ResourceDescriptor,
    WidgetDescriptor,
)


class ResourceRegistry(Protocol):
    def list_resources(self) -> tuple[ResourceDescriptor, ...]:
        ...

    def list_pages(self) -> tuple[PageDescriptor, ...]:
        ...

    def list_widgets(self) -> tuple[WidgetDescriptor, ...]:
        ...

    def list_custom_permissions(self) -> tuple[str, ...]:
        ...

    def list_relation_managers(self) -> tuple[RelationDescriptor, ...]:
        ...


class InMemoryResourceRegistry:
    """
    Deterministic in-memory registry used for bootstrap/tests.

    Listings are returned in stable sorted order.
    """

    def __init__(
        self,
        resources: Iterable[ResourceDescriptor] | None = None,
        pages: Iterable[Identity] | None = None,
        widgets: Iterable[Identity] | None = None,
        custom_permissions: Iterable[str] | None = None,
    ):
        self._resources: dict[str, ResourceDescriptor] = {}
        self._pages: dict[str, PageDescriptor] = {}
        self._widgets: dict[str, WidgetDescriptor] = {}
        self._custom_permissions: list[str] = []
        self._relations: dict[tuple[str, str], RelationDescriptor] = {}

        for resource in resources or ():
            self.register_resource(resource)
        for page in pages or ():
            self.register_page(page)
        for widget in widgets or ():
            self.register_widget(widget)
        for permission in custom_permissions or ():
            self.register_custom_permission(permission)

    def register_resource(self, resource: ResourceDescriptor) -> ResourceDescriptor:
        if not isinstance(resource, ResourceDescriptor):
            raise ValueError("resource must be ResourceDescriptor.")
        if resource.slug in self._resources:
            raise ValueError(f"Duplicate resource slug '{resource.slug}'.")
        self._resources[resource.slug] = resource
        return resource

    def register_page(self, identity: Identity) -> PageDescriptor:
        page = PageDescriptor(identity=identity_path(identity))
        if page.identity in self._pages:
            raise ValueError(f"Duplicate page '{page.identity}'.")
        self._pages[page.identity] = page
        return page

    def register_widget(self, identity: Identity) -> WidgetDescriptor:
        widget = WidgetDescriptor(identity=identity_path(identity))
        if widget.identity in self._widgets:
            raise ValueError(f"Duplicate widget '{widget.identity}'.")
        self._widgets[widget.identity] = widget
        return widget

    def register_custom_permission(self, permission: str) -> str:
        if not isinstance(permission, str) or not permission.strip():
            raise ValueError("custom permission must be a non-empty string.")
        permission = permission.strip()
        if permission not in self._custom_permissions:
            self._custom_permissions.append(permission)
        return permission

    def register_relation_manager(
        self,
        identity: Identity,
        owner_resource_slug: Optional[str] = None,
        actions: Optional[tuple[str, ...]] = None,
    ) -> RelationDescriptor:
        owner = owner_resource_slug or owner_slug_from_identity(identity)
        if not owner:
            raise InvalidSlugError(
                identity_path(identity),
                "relation_manager",
                "has no discoverable owning resource",
            )
        relation = RelationDescriptor(
            owner_resource_slug=owner,
            identity=identity_path(identity),
            actions=tuple(actions or ()),
        )
        key = (relation.owner_resource_slug, relation.relation_slug)
        if key in self._relations:
            raise ValueError(
                f"Duplicate relation manager '{relation.relation_slug}' "
                f"for resource '{relation.owner_resource_slug}'."
            )
        self._relations[key] = relation
        return relation

    def list_resources(self) -> tuple[ResourceDescriptor, ...]:
        return tuple(sorted(self._resources.values(), key=lambda r: r.sort_key()))

    def list_pages(self) -> tuple[PageDescriptor, ...]:
        return tuple(self._pages[name] for name in sorted(self._pages))

    def list_widgets(self) -> tuple[WidgetDescriptor, ...]:
        return tuple(self._widgets[name] for name in sorted(self._widgets))

    def list_custom_permissions(self) -> tuple[str, ...]:
        return tuple(self._custom_permissions)

    def list_relation_managers(self) -> tuple[RelationDescriptor, ...]:
        return tuple(sorted(self._relations.values(), key=lambda r: r.sort_key()))
