from django.apps import AppConfig


class ModerationConfig(AppConfig):
    """
    Configuration for the moderation app.

    The app owns no tables; it provides the approval engine, the abstract
    ``ModeratedContent`` base and the super-admin approval endpoints.
    """
    default_auto_field = "django.db.models.BigAutoField"
    name = "moderation"
