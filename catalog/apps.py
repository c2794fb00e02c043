from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Configuration for the catalog app (categories, tags, resources, bookmarks)."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
