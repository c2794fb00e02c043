"""
Development settings for the frontend resource hub.

Extends the base settings by enabling debugging and allowing all hosts.  Do
not use these settings in production.
"""
from .base import *  # noqa

# Development toggles
DEBUG = True
ALLOWED_HOSTS = ["*", "127.0.0.1", "localhost"]
CSRF_TRUSTED_ORIGINS = ["http://127.0.0.1:8000", "http://localhost:8000", "http://localhost:3000"]
CORS_ALLOWED_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

LOGGING["loggers"]["django.db.backends"] = {  # noqa: F405
    "handlers": ["console"], "level": os.getenv("SQL_LOG_LEVEL", "WARNING"), "propagate": False,  # noqa: F405
}
