"""
ASGI entry point for the frontend resource hub.

The default settings module is the development configuration.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "resource_hub.settings.dev")

application = get_asgi_application()
