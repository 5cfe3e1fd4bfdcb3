"""
Shield Permissions - Authorization Resolver
===========================================
Stateless allow/deny decisions over the permission store.

Precedence for relation managers (feature enabled):
    1. {action}_{resource}__{relation}      allow
    2. view_{resource}  (action == view)    allow
    3. otherwise                            deny

Feature disabled, no relation manager, or a relation manager whose
identity yields no relation slug: plain {action}_{resource} check.
No user: deny (read-only for write-capability checks).
The resolver never writes to the store.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from shield.permissions.constants import ACTION_VIEW, WRITE_ACTIONS
from shield.permissions.errors import InvalidSlugError
from shield.permissions.keys import (
    Identity,
    format_entity_key,
    format_relation_key,
    format_resource_key,
    relation_slug_for,
)
from shield.permissions.models import User
from shield.permissions.provider import PermissionStore
from shield.permissions.settings import ShieldSettings

logger = logging.getLogger("shield.resolver")


class AuthorizationResolver:
    def __init__(self, store: PermissionStore, settings: ShieldSettings):
        self._store = store
        self._settings = settings

    @property
    def settings(self) -> ShieldSettings:
        return self._settings

    def effective_permissions(self, user: Optional[User]) -> frozenset[str]:
        """Union of all held roles' permission keys."""
        if user is None:
            return frozenset()
        keys: set[str] = set()
        for role in self._store.user_roles(user.user_id):
            keys.update(role.permissions)
        return frozenset(keys)

    def has_permission(self, user: Optional[User], key: str) -> bool:
        if user is None:
            return False
        return any(
            self._store.role_has_permission(role.name, key)
            for role in self._store.user_roles(user.user_id)
        )

    def _relation_scope(self, relation_manager: Optional[Identity]) -> bool:
        if not self._settings.relation_managers_enabled or relation_manager is None:
            return False
        try:
            relation_slug_for(relation_manager)
        except InvalidSlugError as exc:
            logger.debug(f"Relation scope unavailable, using resource check: {exc}")
            return False
        return True

    def authorize(
        self,
        user: Optional[User],
        action: str,
        resource_slug: str,
        relation_manager: Optional[Identity] = None,
        record: Any = None,
    ) -> bool:
        """
        Decide whether user may perform action on resource_slug.

        record is accepted for callers that authorize per instance; the
        decision is permission based and does not inspect it.
        """
        if user is None:
            return False

        resource_key = format_resource_key(action, resource_slug)
        if not self._relation_scope(relation_manager):
            return self.has_permission(user, resource_key)

        relation_key = format_relation_key(action, resource_slug, relation_manager)
        if self.has_permission(user, relation_key):
            logger.debug(f"Allowed {user.user_id}: {relation_key}")
            return True

        if action == ACTION_VIEW and self.has_permission(user, resource_key):
            logger.debug(
                f"Allowed {user.user_id}: {relation_key} via fallback {resource_key}"
            )
            return True

        logger.debug(f"Denied {user.user_id}: {relation_key}")
        return False

    def can_view_for_record(
        self,
        user: Optional[User],
        resource_slug: str,
        relation_manager: Identity,
        owner_record: Any = None,
    ) -> bool:
        """Relation manager visibility for an owner record."""
        return self.authorize(
            user,
            ACTION_VIEW,
            resource_slug,
            relation_manager=relation_manager,
            record=owner_record,
        )

    def is_read_only(
        self,
        user: Optional[User],
        resource_slug: str,
        relation_manager: Optional[Identity] = None,
    ) -> bool:
        """
        True iff user holds none of the write keys.

        Write keys are create/update/delete scoped to the relation (when
        relation scope applies) plus the same actions on the resource.
        """
        if user is None:
            return True

        write_keys = [format_resource_key(action, resource_slug) for action in WRITE_ACTIONS]
        if self._relation_scope(relation_manager):
            write_keys = [
                format_relation_key(action, resource_slug, relation_manager)
                for action in WRITE_ACTIONS
            ] + write_keys

        held = self.effective_permissions(user)
        return not any(key in held for key in write_keys)

    def can_view_page(self, user: Optional[User], page: Identity) -> bool:
        key = format_entity_key(self._settings.page_permission_prefix, page)
        return self.has_permission(user, key)

    def can_view_widget(self, user: Optional[User], widget: Identity) -> bool:
        key = format_entity_key(self._settings.widget_permission_prefix, widget)
        return self.has_permission(user, key)
