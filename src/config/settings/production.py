# mypy: ignore-errors
"""Production settings: PostgreSQL, Redis, Sentry and hardened security."""

import logging

import sentry_sdk
from decouple import Csv, config
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.redis import RedisIntegration

from .base import *  # noqa: F403, F401

# Import specific symbols to avoid F405 errors
from .base import (
    CACHES,
    DATABASES,
    LOGGING,
    REST_FRAMEWORK,
    STORAGES,
    VERSION,
)

# GENERAL
# ------------------------------------------------------------------------------
DEBUG = False
ALLOWED_HOSTS = config("ALLOWED_HOSTS", cast=Csv())

# SECURITY
# ------------------------------------------------------------------------------
SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
CSRF_TRUSTED_ORIGINS = config("CSRF_TRUSTED_ORIGINS", cast=Csv(), default="")

# Database Performance
# ------------------------------------------------------------------------------
DATABASES["default"]["CONN_MAX_AGE"] = 600  # 10 minutes
DATABASES["default"]["DISABLE_SERVER_SIDE_CURSORS"] = True

# Static Files
# ------------------------------------------------------------------------------
STORAGES["staticfiles"] = {
    "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"
}

# Cache
# ------------------------------------------------------------------------------
CACHES["default"]["TIMEOUT"] = 3600
CACHES["default"]["OPTIONS"]["CONNECTION_POOL_KWARGS"].update(
    {
        "max_connections": 100,
        "retry_on_timeout": True,
    }
)
# Surface Redis errors instead of hiding them behind cache misses
CACHES["default"]["OPTIONS"]["IGNORE_EXCEPTIONS"] = False

# Logging
# ------------------------------------------------------------------------------
LOGGING["handlers"]["file"] = {
    "level": "WARNING",
    "class": "logging.handlers.RotatingFileHandler",
    "filename": config("LOG_FILE", default="logs/production.log"),
    "maxBytes": 1024 * 1024 * 15,  # 15MB
    "backupCount": 10,
    "formatter": "verbose",
}
LOGGING["root"]["handlers"].append("file")
LOGGING["loggers"]["lpg_stations"]["handlers"].append("file")

# Error Monitoring with Sentry
# ------------------------------------------------------------------------------
SENTRY_DSN = config("SENTRY_DSN", default="")
if SENTRY_DSN:
    sentry_logging = LoggingIntegration(
        level=logging.INFO,  # breadcrumbs
        event_level=logging.ERROR,
    )

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[
            DjangoIntegration(transaction_style="url", middleware_spans=True),
            CeleryIntegration(propagate_traces=True),
            RedisIntegration(),
            sentry_logging,
        ],
        traces_sample_rate=config("SENTRY_TRACES_SAMPLE_RATE", default=0.1, cast=float),
        send_default_pii=False,
        environment=config("ENVIRONMENT", default="production"),
        release=VERSION,
        attach_stacktrace=True,
    )

# Celery
# ------------------------------------------------------------------------------
CELERY_TASK_ALWAYS_EAGER = False
CELERY_WORKER_PREFETCH_MULTIPLIER = 4
CELERY_TASK_ACKS_LATE = False  # visit rows are best-effort
CELERY_WORKER_MAX_TASKS_PER_CHILD = 1000

# API Rate Limiting
# ------------------------------------------------------------------------------
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    "anon": "100/hour",
    "user": "1000/hour",
}

# Sessions
# ------------------------------------------------------------------------------
SESSION_COOKIE_AGE = 1800  # 30 minutes
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"

# CORS
# ------------------------------------------------------------------------------
CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = config("CORS_ALLOWED_ORIGINS", cast=Csv(), default="")
CORS_ALLOW_CREDENTIALS = True
