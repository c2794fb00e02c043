"""
ViewSets and API views for the catalog app.

Every read goes through ``ModeratedQuerySet.visible_to`` with the actor
derived from the request, so anonymous users only ever see public,
approved items, general users additionally see their own, and super
admins see everything.  ``show_private`` / ``show_pending`` narrow list
views to the owner's private items or the pending public queue.
Writes require the item's owner or a super admin.
"""
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F, Q
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from common.ordering import ordering_from_params
from moderation.choices import VisibilityMode
from moderation.engine import Actor, visibility_mode_from_flags
from moderation.exceptions import NotFound
from moderation.permissions import IsOwnerOrSuperAdmin

from .filters import ResourceFilter
from .models import Bookmark, Category, Resource, Tag
from .scraper import fetch_metadata
from .serializers import (
    BookmarkToggleSerializer,
    CategorySerializer,
    ResourceSerializer,
    ScrapeUrlSerializer,
    TagSerializer,
)
from .tasks import backfill_resource_metadata_task

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}

TAXONOMY_SORT_FIELDS = {
    "name": "name",
    "slug": "slug",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

RESOURCE_SORT_FIELDS = {
    "created_at": "created_at",
    "updated_at": "updated_at",
    "title": "title",
    "click_count": "click_count",
}


def _flag(params, name) -> bool:
    return str(params.get(name, "")).strip().lower() in TRUTHY


def request_actor(request):
    return Actor.from_user(getattr(request, "user", None))


class ModeratedViewSet(viewsets.ModelViewSet):
    """Visibility-filtered CRUD shared by categories, tags and resources."""
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsOwnerOrSuperAdmin]
    model = None

    def get_actor(self):
        return request_actor(self.request)

    def get_visibility_mode(self):
        if self.action != "list":
            return VisibilityMode.DEFAULT
        params = self.request.query_params
        return visibility_mode_from_flags(
            show_private=_flag(params, "show_private"),
            show_pending=_flag(params, "show_pending"),
        )

    def base_queryset(self):
        return self.model.objects.select_related("owner", "owner__profile")

    def get_queryset(self):
        return self.base_queryset().visible_to(self.get_actor(), self.get_visibility_mode())

    def perform_create(self, serializer):
        instance = serializer.save()
        logger.info(
            "Created %s id=%s status=%s by user=%s",
            self.model._meta.model_name, instance.pk, instance.approval_status, self.request.user.pk,
        )

    def perform_destroy(self, instance):
        logger.info(
            "Deleted %s id=%s by user=%s",
            self.model._meta.model_name, instance.pk, self.request.user.pk,
        )
        instance.delete()


class TaxonomyViewSet(ModeratedViewSet):
    """
    Categories and tags: unpaginated, approved items first, and ``?slug=``
    returns the single match.  Names are unique case-insensitively at the
    database, so every name appears once.
    """
    pagination_class = None

    def list(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset())

        slug = (request.query_params.get("slug") or "").strip()
        if slug:
            item = qs.filter(slug__iexact=slug).first()
            if item is None:
                raise NotFound(f"{self.model._meta.verbose_name.capitalize()} not found.")
            return Response(self.get_serializer(item).data)

        ordering = ordering_from_params(request.query_params, TAXONOMY_SORT_FIELDS, default_field="name")
        items = qs.approved_first(*ordering, "id")
        return Response(self.get_serializer(items, many=True).data)


class CategoryViewSet(TaxonomyViewSet):
    serializer_class = CategorySerializer
    model = Category


class TagViewSet(TaxonomyViewSet):
    serializer_class = TagSerializer
    model = Tag


class ResourceViewSet(ModeratedViewSet):
    """
    Resources with category/search/flag filters and optional limit/offset
    pagination.  ``POST /resources/<id>/click/`` counts a visit.
    """
    serializer_class = ResourceSerializer
    model = Resource
    filter_backends = [DjangoFilterBackend]
    filterset_class = ResourceFilter

    def base_queryset(self):
        return (
            Resource.objects.select_related("category", "owner", "owner__profile")
            .prefetch_related("tags")
        )

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == "list":
            ordering = ordering_from_params(
                self.request.query_params, RESOURCE_SORT_FIELDS,
                default_field="created_at", default_order="desc",
            )
            qs = qs.order_by(*ordering, "-id")
        return qs

    def perform_create(self, serializer):
        super().perform_create(serializer)
        resource = serializer.instance
        if settings.RESOURCE_METADATA_BACKFILL and not resource.thumbnail:
            transaction.on_commit(lambda: self._dispatch_backfill(resource.pk))

    @staticmethod
    def _dispatch_backfill(resource_id):
        try:
            backfill_resource_metadata_task.delay(resource_id)
        except Exception as e:
            logger.error("Could not queue metadata backfill for resource %s: %s", resource_id, e)

    @action(detail=True, methods=["post"], permission_classes=[permissions.AllowAny])
    def click(self, request, pk=None):
        resource = self.get_object()
        Resource.objects.filter(pk=resource.pk).update(click_count=F("click_count") + 1)
        resource.refresh_from_db(fields=["click_count"])
        return Response({"click_count": resource.click_count}, status=status.HTTP_200_OK)


class BookmarkView(APIView):
    """
    GET lists the user's bookmarked resources, newest bookmark first.
    POST ``{"resource_id": n}`` toggles the bookmark.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        actor = request_actor(request)
        visible = Resource.objects.visible_to(actor).values("pk")
        bookmarks = (
            Bookmark.objects.filter(user=request.user, resource__in=visible)
            .select_related("resource", "resource__category", "resource__owner", "resource__owner__profile")
            .prefetch_related("resource__tags")
            .order_by("-created_at", "-id")
        )
        resources = [b.resource for b in bookmarks]
        data = ResourceSerializer(resources, many=True, context={"request": request}).data
        return Response(data, status=status.HTTP_200_OK)

    def post(self, request, *args, **kwargs):
        ser = BookmarkToggleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        resource = get_object_or_404(
            Resource.objects.visible_to(request_actor(request)),
            pk=ser.validated_data["resource_id"],
        )

        with transaction.atomic():
            deleted, _ = Bookmark.objects.filter(user=request.user, resource=resource).delete()
            if not deleted:
                Bookmark.objects.create(user=request.user, resource=resource)

        return Response({"bookmarked": not deleted}, status=status.HTTP_200_OK)


class SearchView(APIView):
    """Quick search across category names, resource titles and tag names."""
    permission_classes = [permissions.AllowAny]
    default_limit = 5
    max_limit = 50

    def get_limit(self, request):
        raw = request.query_params.get("limit")
        if raw in (None, ""):
            return self.default_limit
        try:
            limit = int(raw)
        except (TypeError, ValueError):
            raise ValidationError({"limit": "Must be an integer."})
        return max(1, min(limit, self.max_limit))

    def get(self, request, *args, **kwargs):
        q = (request.query_params.get("q") or "").strip()
        if not q:
            return Response([], status=status.HTTP_200_OK)
        limit = self.get_limit(request)
        actor = request_actor(request)

        results = []
        for category in Category.objects.visible_to(actor).filter(name__icontains=q).order_by("name")[:limit]:
            results.append({"type": "category", "id": category.id, "name": category.name, "slug": category.slug})
        resources = (
            Resource.objects.visible_to(actor)
            .filter(Q(title__icontains=q))
            .order_by("-click_count", "title")[:limit]
        )
        for resource in resources:
            results.append({
                "type": "resource",
                "id": resource.id,
                "title": resource.title,
                "url": resource.url,
                "thumbnail": resource.thumbnail,
            })
        for tag in Tag.objects.visible_to(actor).filter(name__icontains=q).order_by("name")[:limit]:
            results.append({"type": "tag", "id": tag.id, "name": tag.name, "slug": tag.slug, "color": tag.color})

        return Response(results, status=status.HTTP_200_OK)


class ScrapeUrlView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        ser = ScrapeUrlSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        meta = fetch_metadata(ser.validated_data["url"])
        return Response(meta.as_dict(), status=status.HTTP_200_OK)
