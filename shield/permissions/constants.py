"""
Shield Permissions - Constants
==============================
"""

RELATION_SEPARATOR = "__"
ACTION_SEPARATOR = "_"
RELATION_MANAGER_SUFFIX = "RelationManager"

ACTION_VIEW = "view"
ACTION_VIEW_ANY = "view_any"
ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"
ACTION_DELETE_ANY = "delete_any"
ACTION_RESTORE = "restore"
ACTION_RESTORE_ANY = "restore_any"
ACTION_REPLICATE = "replicate"
ACTION_REORDER = "reorder"
ACTION_FORCE_DELETE = "force_delete"
ACTION_FORCE_DELETE_ANY = "force_delete_any"

DEFAULT_RESOURCE_ACTIONS: tuple[str, ...] = (
    ACTION_VIEW,
    ACTION_VIEW_ANY,
    ACTION_CREATE,
    ACTION_UPDATE,
    ACTION_DELETE,
    ACTION_DELETE_ANY,
    ACTION_RESTORE,
    ACTION_RESTORE_ANY,
    ACTION_REPLICATE,
    ACTION_REORDER,
    ACTION_FORCE_DELETE,
    ACTION_FORCE_DELETE_ANY,
)

DEFAULT_RELATION_ACTIONS: tuple[str, ...] = (
    ACTION_VIEW,
    ACTION_CREATE,
    ACTION_UPDATE,
    ACTION_DELETE,
)

# Write actions inspected by read-only determination for relation managers.
WRITE_ACTIONS: tuple[str, ...] = (
    ACTION_CREATE,
    ACTION_UPDATE,
    ACTION_DELETE,
)

BUCKET_RESOURCES = "resources"
BUCKET_RELATIONS = "relations"
BUCKET_PAGES = "pages"
BUCKET_WIDGETS = "widgets"
BUCKET_CUSTOM = "custom"

DEFAULT_GUARD_NAME = "web"
DEFAULT_SUPER_ADMIN_ROLE = "super_admin"
DEFAULT_PANEL_USER_ROLE = "panel_user"
DEFAULT_PAGE_PREFIX = "page"
DEFAULT_WIDGET_PREFIX = "widget"
