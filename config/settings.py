"""
Manara - Django Settings (Infrastructure Only)
================================================
Django serves as the container for the ledger's persistence app
and its logging configuration. The ledger architecture is the
authority; Django does not dictate structure.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("MANARA_SECRET_KEY", "manara-dev-key-replace-before-deployment")

DEBUG = os.environ.get("MANARA_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── Manara Modules ────────────────────────────────────
    "core.ledger_store",
]

MIDDLEWARE = []

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("MANARA_DB_PATH", BASE_DIR / "db.sqlite3"),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Logging ───────────────────────────────────────────────────
# All ledger loggers live under the "manara" namespace.
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "ledger": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "ledger",
        },
    },
    "loggers": {
        "manara": {
            "handlers": ["console"],
            "level": os.environ.get("MANARA_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}

# ── Manara Application Settings ───────────────────────────────
MANARA = {
    "ASSISTANT_TIMEOUT_SECONDS": 30,
    "TOP_ENTITIES_LIMIT": 5,
    "CURRENCY": "SAR",
}
