"""
Shield – Django Settings (Infrastructure Only)
==============================================
Host settings used by the test-suite and as a template for projects
embedding shield. Shield behaviour is configured through SHIELD.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("SHIELD_SECRET_KEY", "shield-dev-key-replace-before-deployment")

DEBUG = True

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "shield",
    "shield.permissions_store",
]

# ── Database ──────────────────────────────────────────────────
# SQLite for development and tests. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# ── Shield ────────────────────────────────────────────────────
SHIELD = {
    "relation_managers_enabled": True,
    "panel_user_enabled": True,
    "super_admin_role": "super_admin",
    "panel_user_role": "panel_user",
}

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
    },
    "loggers": {
        "shield": {
            "handlers": ["console"],
            "level": os.environ.get("SHIELD_LOG_LEVEL", "INFO"),
        },
    },
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
