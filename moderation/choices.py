"""
Enumerations shared by the moderation engine, the catalog models and the
users app.
"""
from django.db import models


class ApprovalStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"


class Role(models.TextChoices):
    GENERAL = "GENERAL", "General"
    SUPER_ADMIN = "SUPER_ADMIN", "Super admin"


class ContentKind(models.TextChoices):
    """The three moderatable content kinds and the model each one maps to."""
    RESOURCE = "resource", "Resource"
    CATEGORY = "category", "Category"
    TAG = "tag", "Tag"

    @property
    def model_label(self) -> str:
        return f"catalog.{self.label}"


class VisibilityMode(models.TextChoices):
    DEFAULT = "default", "Default"
    PRIVATE_ONLY = "private_only", "Private only"
    PENDING_ONLY = "pending_only", "Pending only"
