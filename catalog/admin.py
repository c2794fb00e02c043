# catalog/admin.py
from django.contrib import admin, messages

from moderation.choices import ApprovalStatus, ContentKind
from moderation.engine import Actor
from moderation.services import transition

from .models import Bookmark, Category, Resource, ResourceTag, Tag


class ModeratedAdmin(admin.ModelAdmin):
    """Approve / reject actions backed by ``moderation.services.transition``."""
    content_kind = None
    actions = ["approve_selected", "reject_selected", "mark_pending"]
    list_filter = ("approval_status", "is_public")

    def _transition(self, request, queryset, target):
        actor = Actor.from_user(request.user)
        for obj in queryset:
            transition(actor, self.content_kind, obj.pk, target)
        self.message_user(
            request,
            f"{queryset.count()} item(s) set to {target.label.lower()}.",
            messages.SUCCESS,
        )

    @admin.action(description="Approve selected items")
    def approve_selected(self, request, queryset):
        self._transition(request, queryset, ApprovalStatus.APPROVED)

    @admin.action(description="Reject selected items")
    def reject_selected(self, request, queryset):
        self._transition(request, queryset, ApprovalStatus.REJECTED)

    @admin.action(description="Move selected items back to pending")
    def mark_pending(self, request, queryset):
        self._transition(request, queryset, ApprovalStatus.PENDING)


@admin.register(Category)
class CategoryAdmin(ModeratedAdmin):
    content_kind = ContentKind.CATEGORY
    list_display = ("name", "slug", "owner", "is_public", "approval_status", "created_at")
    search_fields = ("name", "slug", "description")
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("name",)


@admin.register(Tag)
class TagAdmin(ModeratedAdmin):
    content_kind = ContentKind.TAG
    list_display = ("name", "slug", "color", "owner", "is_public", "approval_status")
    search_fields = ("name", "slug")
    ordering = ("name",)


class ResourceTagInline(admin.TabularInline):
    model = ResourceTag
    extra = 0
    autocomplete_fields = ("tag",)


@admin.register(Resource)
class ResourceAdmin(ModeratedAdmin):
    content_kind = ContentKind.RESOURCE
    list_display = ("title", "category", "owner", "is_public", "approval_status",
                    "is_hot", "is_trending", "click_count", "created_at")
    list_filter = ("approval_status", "is_public", "is_hot", "is_trending", "category")
    search_fields = ("title", "url", "description")
    ordering = ("-created_at",)
    inlines = [ResourceTagInline]


@admin.register(Bookmark)
class BookmarkAdmin(admin.ModelAdmin):
    list_display = ("user", "resource", "created_at")
    ordering = ("-created_at",)
