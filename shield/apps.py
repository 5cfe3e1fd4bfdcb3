"""
Shield - App Configuration
==========================
Connects the panel-user lifecycle hooks when Django finishes loading.

Rules:
- Only when SHIELD['panel_user_enabled'] is set
- Skipped during console management commands and test runs
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger("shield.bootstrap")

# Console commands that must not provision or assign the panel role
SKIP_COMMANDS = {
    "migrate",
    "makemigrations",
    "showmigrations",
    "sqlmigrate",
    "flush",
    "createsuperuser",
    "changepassword",
    "loaddata",
    "dumpdata",
    "shell",
    "dbshell",
    "inspectdb",
    "test",
    "collectstatic",
    "check",
}


def _is_management_command_skip() -> bool:
    if len(sys.argv) >= 2:
        return sys.argv[1] in SKIP_COMMANDS
    return False


def _is_pytest_context() -> bool:
    return (
        "PYTEST_CURRENT_TEST" in os.environ
        or "pytest" in sys.modules
    )


class ShieldConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "shield"
    label = "shield"
    verbose_name = "Shield"

    def ready(self):
        from shield.permissions.settings import ShieldSettings

        settings = ShieldSettings.from_django_settings()
        if not settings.panel_user_enabled:
            return
        if _is_management_command_skip() or _is_pytest_context():
            logger.info(
                "Panel user lifecycle hooks skipped for management/test context."
            )
            return

        from shield.permissions.db_provider import DbPermissionStore
        from shield.permissions.panel import PanelAccessGate, connect_user_lifecycle

        store = DbPermissionStore(guard_name=settings.guard_name)
        connect_user_lifecycle(PanelAccessGate(store, settings))
