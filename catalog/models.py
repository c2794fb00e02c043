"""
Models for the catalog app.

``Category``, ``Tag`` and ``Resource`` are the three moderatable content
kinds: each carries ``is_public`` / ``approval_status`` from
``ModeratedContent`` and an ``owner``.  Natural keys (category and tag
name/slug, resource title/url) are unique case-insensitively across all
users.  ``ResourceTag`` joins resources to tags and ``Bookmark`` records a
user's saved resources.
"""
import re

from django.conf import settings
from django.db import models
from django.db.models.functions import Lower
from django.utils.text import slugify

from moderation.models import ModeratedContent

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def tag_slug(name: str) -> str:
    """Lowercase, collapse runs of non-alphanumerics to '-', trim dashes."""
    return _NON_ALNUM_RE.sub("-", (name or "").lower()).strip("-")


class Category(ModeratedContent):
    name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140)
    description = models.TextField(blank=True)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="categories",
    )

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"
        constraints = [
            models.UniqueConstraint(Lower("name"), name="catalog_category_name_ci_unique"),
            models.UniqueConstraint(Lower("slug"), name="catalog_category_slug_ci_unique"),
        ]
        indexes = [
            models.Index(fields=["is_public", "approval_status"], name="catalog_cat_visibility_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug and self.name:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class Tag(ModeratedContent):
    name = models.CharField(max_length=60)
    slug = models.SlugField(max_length=80)
    color = models.CharField(max_length=20, blank=True, default="")
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="tags",
    )

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(Lower("name"), name="catalog_tag_name_ci_unique"),
            models.UniqueConstraint(Lower("slug"), name="catalog_tag_slug_ci_unique"),
        ]
        indexes = [
            models.Index(fields=["is_public", "approval_status"], name="catalog_tag_visibility_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug and self.name:
            self.slug = tag_slug(self.name)
        super().save(*args, **kwargs)


class Resource(ModeratedContent):
    """A curated link to a frontend developer resource."""
    title = models.CharField(max_length=255)
    url = models.URLField(max_length=500)
    description = models.TextField()
    thumbnail = models.URLField(max_length=500, blank=True, default="")
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="resources",
    )
    tags = models.ManyToManyField(
        Tag,
        through="ResourceTag",
        related_name="resources",
        blank=True,
    )
    is_hot = models.BooleanField(default=False)
    is_trending = models.BooleanField(default=False)
    click_count = models.PositiveIntegerField(default=0)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="resources",
    )

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(Lower("title"), name="catalog_resource_title_ci_unique"),
            models.UniqueConstraint(Lower("url"), name="catalog_resource_url_ci_unique"),
        ]
        indexes = [
            models.Index(fields=["is_public", "approval_status"], name="catalog_res_visibility_idx"),
            models.Index(fields=["category", "is_hot", "is_trending"], name="catalog_res_cat_flags_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class ResourceTag(models.Model):
    resource = models.ForeignKey(Resource, on_delete=models.CASCADE, related_name="resource_tags")
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name="resource_tags")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["resource", "tag"], name="catalog_resource_tag_unique"),
        ]

    def __str__(self) -> str:
        return f"{self.resource_id}:{self.tag_id}"


class Bookmark(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookmarks",
    )
    resource = models.ForeignKey(Resource, on_delete=models.CASCADE, related_name="bookmarks")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "resource"], name="catalog_bookmark_unique"),
        ]

    def __str__(self) -> str:
        return f"Bookmark({self.user_id} -> {self.resource_id})"
