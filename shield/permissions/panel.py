"""
Shield Permissions - Panel Access Gate
======================================
Decides whether a user may enter the admin panel at all and keeps the
panel-user role assigned across the user lifecycle.

    can_enter_panel(user) = holds super_admin_role OR holds panel_user_role

With panel_user_enabled, every created user receives the panel-user
role (created on first need); deleting a user removes the assignment
but never the role itself.
"""

from __future__ import annotations

import logging
from typing import Optional

from django.db.models.signals import post_save, pre_delete

from shield.permissions.contracts import user_from_django
from shield.permissions.models import Role, User
from shield.permissions.provider import PermissionStore
from shield.permissions.settings import ShieldSettings

logger = logging.getLogger("shield.panel")

USER_CREATED_DISPATCH_UID = "shield.panel.user_created"
USER_DELETING_DISPATCH_UID = "shield.panel.user_deleting"


class PanelAccessGate:
    def __init__(self, store: PermissionStore, settings: ShieldSettings):
        self._store = store
        self._settings = settings

    def can_enter_panel(self, user: Optional[User]) -> bool:
        if user is None:
            return False
        allowed = {self._settings.super_admin_role, self._settings.panel_user_role}
        return any(role.name in allowed for role in self._store.user_roles(user.user_id))

    def provision_panel_user_role(self) -> Optional[Role]:
        if not self._settings.panel_user_enabled:
            return None
        return self._store.ensure_role(self._settings.panel_user_role)

    def on_user_created(self, user: User) -> None:
        if not self._settings.panel_user_enabled:
            return
        self.provision_panel_user_role()
        self._store.assign_role(user.user_id, self._settings.panel_user_role)
        logger.info(
            f"Panel user role assigned: {user.user_id} → "
            f"{self._settings.panel_user_role}"
        )

    def on_user_deleted(self, user: User) -> None:
        self._store.remove_role(user.user_id, self._settings.panel_user_role)
        logger.info(
            f"Panel user role removed: {user.user_id} from "
            f"{self._settings.panel_user_role}"
        )


def connect_user_lifecycle(gate: PanelAccessGate, sender=None) -> None:
    """Wire gate lifecycle hooks to the auth user model signals."""
    if sender is None:
        from django.contrib.auth import get_user_model

        sender = get_user_model()

    def _on_saved(sender, instance, created=False, raw=False, **kwargs):
        if created and not raw:
            gate.on_user_created(user_from_django(instance))

    def _on_deleting(sender, instance, **kwargs):
        gate.on_user_deleted(user_from_django(instance))

    post_save.connect(
        _on_saved,
        sender=sender,
        weak=False,
        dispatch_uid=USER_CREATED_DISPATCH_UID,
    )
    pre_delete.connect(
        _on_deleting,
        sender=sender,
        weak=False,
        dispatch_uid=USER_DELETING_DISPATCH_UID,
    )
    logger.debug(f"User lifecycle hooks connected for {sender.__name__}")


def disconnect_user_lifecycle(sender=None) -> None:
    if sender is None:
        from django.contrib.auth import get_user_model

        sender = get_user_model()

    post_save.disconnect(sender=sender, dispatch_uid=USER_CREATED_DISPATCH_UID)
    pre_delete.disconnect(sender=sender, dispatch_uid=USER_DELETING_DISPATCH_UID)
