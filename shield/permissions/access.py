"""
Shield Permissions - Access Objects
===================================
Per-entity gates built by composition: each holds the shared resolver
and an auth context and answers for the current user.
"""

from __future__ import annotations

from typing import Any, Optional

from shield.permissions.constants import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    ACTION_VIEW,
)
from shield.permissions.contracts import AuthContext
from shield.permissions.keys import Identity, identity_path, owner_slug_from_identity
from shield.permissions.models import ResourceDescriptor
from shield.permissions.resolver import AuthorizationResolver


class ResourceAccess:
    def __init__(
        self,
        resolver: AuthorizationResolver,
        auth: AuthContext,
        resource: ResourceDescriptor,
    ):
        self._resolver = resolver
        self._auth = auth
        self._resource = resource

    @property
    def resource(self) -> ResourceDescriptor:
        return self._resource

    def permission_prefixes(self) -> tuple[str, ...]:
        return (
            self._resource.permission_prefixes
            or self._resolver.settings.resource_permission_prefixes
        )

    def can(self, action: str, record: Any = None) -> bool:
        return self._resolver.authorize(
            self._auth.current_user(),
            action,
            self._resource.slug,
            record=record,
        )


class RelationManagerAccess:
    """
    Gate for one relation manager under an owning resource.

    The owner slug is taken from the argument or derived from the
    identity path. Without an owner slug, relation scope is not
    applied and checks go through fallback_slug as plain resource checks.
    """

    def __init__(
        self,
        resolver: AuthorizationResolver,
        auth: AuthContext,
        identity: Identity,
        owner_resource_slug: Optional[str] = None,
        fallback_slug: Optional[str] = None,
    ):
        self._resolver = resolver
        self._auth = auth
        self._identity = identity_path(identity)
        self._owner_slug = owner_resource_slug or owner_slug_from_identity(identity)
        self._fallback_slug = fallback_slug

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def owner_resource_slug(self) -> Optional[str]:
        return self._owner_slug

    def _scope(self) -> tuple[Optional[str], Optional[str]]:
        if self._owner_slug:
            return self._owner_slug, self._identity
        return self._fallback_slug, None

    def can(self, action: str, record: Any = None) -> bool:
        slug, relation_manager = self._scope()
        if slug is None:
            return False
        return self._resolver.authorize(
            self._auth.current_user(),
            action,
            slug,
            relation_manager=relation_manager,
            record=record,
        )

    def can_view(self, record: Any = None) -> bool:
        return self.can(ACTION_VIEW, record)

    def can_create(self) -> bool:
        return self.can(ACTION_CREATE)

    def can_edit(self, record: Any = None) -> bool:
        return self.can(ACTION_UPDATE, record)

    def can_delete(self, record: Any = None) -> bool:
        return self.can(ACTION_DELETE, record)

    def can_view_for_record(self, owner_record: Any = None) -> bool:
        slug, relation_manager = self._scope()
        if slug is None:
            return False
        if relation_manager is None:
            return self._resolver.authorize(
                self._auth.current_user(), ACTION_VIEW, slug, record=owner_record
            )
        return self._resolver.can_view_for_record(
            self._auth.current_user(),
            slug,
            relation_manager,
            owner_record=owner_record,
        )

    def is_read_only(self) -> bool:
        slug, relation_manager = self._scope()
        if slug is None:
            return True
        return self._resolver.is_read_only(
            self._auth.current_user(),
            slug,
            relation_manager=relation_manager,
        )


class PageAccess:
    def __init__(self, resolver: AuthorizationResolver, auth: AuthContext, page: Identity):
        self._resolver = resolver
        self._auth = auth
        self._page = page

    def can_access(self) -> bool:
        return self._resolver.can_view_page(self._auth.current_user(), self._page)


class WidgetAccess:
    def __init__(self, resolver: AuthorizationResolver, auth: AuthContext, widget: Identity):
        self._resolver = resolver
        self._auth = auth
        self._widget = widget

    def can_view(self) -> bool:
        return self._resolver.can_view_widget(self._auth.current_user(), self._widget)
