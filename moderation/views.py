"""
Super-admin approval endpoints.

``GET /api/admin/approval/`` lists public submissions in a given status
(``PENDING`` by default) grouped by kind; ``POST`` moves one item to a new
status through ``services.transition``.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.models import Category, Resource, Tag
from catalog.serializers import (
    CategorySerializer,
    ResourceSerializer,
    TagSerializer,
)

from .choices import ContentKind
from .engine import Actor
from .permissions import IsSuperAdmin
from .serializers import ApprovalQueueQuerySerializer, ApprovalTransitionSerializer
from .services import transition

logger = logging.getLogger(__name__)

SERIALIZER_FOR_KIND = {
    ContentKind.RESOURCE: ResourceSerializer,
    ContentKind.CATEGORY: CategorySerializer,
    ContentKind.TAG: TagSerializer,
}


class ApprovalView(APIView):
    permission_classes = [IsSuperAdmin]

    def get(self, request, *args, **kwargs):
        query = ApprovalQueueQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        wanted = query.validated_data.get("type") or None
        status_filter = query.validated_data["status"]
        ctx = {"request": request}

        result = {}
        if wanted in (None, "resources"):
            qs = (
                Resource.objects.public_in_status(status_filter)
                .select_related("category", "owner", "owner__profile")
                .prefetch_related("tags")
                .order_by("-created_at")
            )
            result["resources"] = ResourceSerializer(qs, many=True, context=ctx).data
        if wanted in (None, "categories"):
            qs = (
                Category.objects.public_in_status(status_filter)
                .select_related("owner", "owner__profile")
                .order_by("-created_at")
            )
            result["categories"] = CategorySerializer(qs, many=True, context=ctx).data
        if wanted in (None, "tags"):
            qs = (
                Tag.objects.public_in_status(status_filter)
                .select_related("owner", "owner__profile")
                .order_by("-created_at")
            )
            result["tags"] = TagSerializer(qs, many=True, context=ctx).data

        return Response(result, status=status.HTTP_200_OK)

    def post(self, request, *args, **kwargs):
        ser = ApprovalTransitionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        item = transition(Actor.from_user(request.user), data["type"], data["id"], data["status"])
        kind = ContentKind(str(data["type"]).lower())
        payload = SERIALIZER_FOR_KIND[kind](item, context={"request": request}).data

        return Response(
            {
                "success": True,
                "message": f"{kind.value} {item.approval_status.lower()} successfully",
                "data": payload,
            },
            status=status.HTTP_200_OK,
        )
