"""
Django settings for erp_project.

Every deployment knob is read from the environment; the defaults
are for local development only.
"""

import os
from pathlib import Path

# BASE_DIR = erp_project/ (where manage.py lives)
BASE_DIR = Path(__file__).resolve().parent.parent


def env(key, default=None):
    return os.environ.get(key, default)


def env_int(key, default):
    try:
        return int(os.environ[key])
    except (KeyError, ValueError):
        return default


def env_bool(key, default=False):
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ── Security ──────────────────────────────────────────────────
SECRET_KEY = env("SECRET_KEY", "erp-dev-key-replace-before-deployment")
DEBUG = env_bool("DEBUG", False)
ALLOWED_HOSTS = [h for h in env("ALLOWED_HOSTS", "*").split(",") if h]

# ── Installed Apps ────────────────────────────────────────────
# JSON API only: no admin, sessions or templates
INSTALLED_APPS = [
    "erp_core",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "erp_core.middleware.TokenAuthenticationMiddleware",
]

ROOT_URLCONF = "erp_project.urls"
WSGI_APPLICATION = "erp_project.wsgi.application"
# "/api/users" and "/api/users/" are different routes
APPEND_SLASH = False

# ── Database ──────────────────────────────────────────────────
# SQLite for development; DB_ENGINE=postgresql for the real store
if env("DB_ENGINE", "sqlite") == "postgresql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "HOST": env("DB_HOST", "localhost"),
            "PORT": env("DB_PORT", "5432"),
            "USER": env("DB_USER", "erp_user"),
            "PASSWORD": env("DB_PASSWORD", "erp_password"),
            "NAME": env("DB_NAME", "erp_saas"),
            "OPTIONS": {"sslmode": env("DB_SSLMODE", "disable")},
            # pooled connections, one per worker thread
            "CONN_MAX_AGE": env_int("DB_CONN_MAX_AGE", 60),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": env("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Upper bound for each statement inside a writer's atomic scope (PostgreSQL)
ERP_STATEMENT_TIMEOUT_MS = env_int("ERP_STATEMENT_TIMEOUT_MS", 5000)

# ── Tokens ────────────────────────────────────────────────────
JWT_SECRET = env("JWT_SECRET", "your-secret-key")
JWT_EXPIRE_HOURS = env_int("JWT_EXPIRE_HOURS", 24)

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "erp_core": {
            "handlers": ["console"],
            "level": env("ERP_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "django": {
            "handlers": ["console"],
            "level": env("DJANGO_LOG_LEVEL", "WARNING"),
        },
    },
}
