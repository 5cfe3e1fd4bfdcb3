"""
Shield Permissions Store - App Configuration
============================================
Persistent permissions, roles, role grants and user role assignments.
"""

from django.apps import AppConfig


class ShieldPermissionsStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "shield.permissions_store"
    label = "shield_permissions_store"
    verbose_name = "Shield Permissions Store"
