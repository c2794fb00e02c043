"""
Views for the users app.

Provides registration, session login/logout, JWT login by email and the
super-admin user management endpoints (list with content counts, role
changes and deletion).
"""
import logging

from django.contrib.auth import get_user_model
from django.contrib.auth import login as django_login, logout as django_logout
from django.db.models import Count
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import ensure_csrf_cookie
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from common.ordering import ordering_from_params
from moderation.choices import Role
from moderation.permissions import IsSuperAdmin

from .filters import AdminUserFilter
from .serializers import (
    AdminUserSerializer,
    EmailTokenObtainPairSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

UserModel = get_user_model()

USER_SORT_FIELDS = {
    "created_at": "date_joined",
    "date_joined": "date_joined",
    "email": "email",
    "name": "profile__name",
    "role": "profile__role",
}


class RegisterView(APIView):
    """Create a GENERAL user and start a session for them."""
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        django_login(request, user, backend="django.contrib.auth.backends.ModelBackend")
        logger.info("Registered user id=%s", user.pk)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class EmailTokenObtainPairView(TokenObtainPairView):
    """
    Obtain JWT tokens using email + password.
    """
    permission_classes = [permissions.AllowAny]
    serializer_class = EmailTokenObtainPairSerializer


class SessionLoginView(APIView):
    """
    Session-based login. Expects JSON: {"email": "...", "password": "..."}
    On success, creates a Django session (cookie-based).
    """
    permission_classes = []  # allow unauthenticated
    authentication_classes = []

    @method_decorator(ensure_csrf_cookie)
    def post(self, request):
        data = request.data or {}
        email = (data.get("email") or "").strip().lower()
        password = data.get("password") or ""
        if not email or not password:
            return Response({"error": "email and password are required"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            user = UserModel.objects.get(email__iexact=email)
        except UserModel.DoesNotExist:
            return Response({"error": "Invalid credentials"}, status=status.HTTP_400_BAD_REQUEST)
        if not user.is_active or not user.check_password(password):
            return Response({"error": "Invalid credentials"}, status=status.HTTP_400_BAD_REQUEST)

        django_login(request, user, backend="django.contrib.auth.backends.ModelBackend")
        request.session.cycle_key()

        return Response({"detail": "logged_in", "user": UserSerializer(user).data}, status=status.HTTP_200_OK)


class SessionLogoutView(APIView):
    """Session-based logout. Destroys the user's session cookie."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        django_logout(request)
        return Response({"detail": "logged_out"}, status=status.HTTP_200_OK)


class SessionMeView(APIView):
    """Return the current authenticated user (401 if not logged in)."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data, status=status.HTTP_200_OK)


class CSRFCookieView(APIView):
    """
    GET to set the CSRF cookie. Call this before POST /session/login from a browser.
    """
    permission_classes = []
    authentication_classes = []

    @method_decorator(ensure_csrf_cookie)
    def get(self, request):
        return Response({"detail": "CSRF cookie set"}, status=status.HTTP_200_OK)


class AdminUserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Super-admin user management.  Lists users with their role and the
    number of resources, categories and tags they own; PATCH changes the
    role; DELETE removes the account together with its content.
    """
    serializer_class = AdminUserSerializer
    permission_classes = [IsSuperAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_class = AdminUserFilter
    pagination_class = None
    http_method_names = ["get", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = (
            UserModel.objects.select_related("profile")
            .annotate(
                resource_count=Count("resources", distinct=True),
                category_count=Count("categories", distinct=True),
                tag_count=Count("tags", distinct=True),
            )
        )
        ordering = ordering_from_params(
            self.request.query_params, USER_SORT_FIELDS, default_field="created_at", default_order="desc"
        )
        return qs.order_by(*ordering, "id")

    def perform_update(self, serializer):
        role = serializer.validated_data.get("profile", {}).get("role")
        if serializer.instance.pk == self.request.user.pk and role and role != Role.SUPER_ADMIN:
            raise ValidationError({"role": "You cannot remove your own super admin role."})
        serializer.save()
        logger.info(
            "User id=%s role set to %s by user=%s",
            serializer.instance.pk, role, self.request.user.pk,
        )

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        super().update(request, *args, **kwargs)
        # re-read so the response carries the annotated counts
        instance = self.get_queryset().get(pk=kwargs["pk"])
        return Response(self.get_serializer(instance).data)

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise ValidationError({"detail": "You cannot delete your own account."})
        logger.info("User id=%s deleted by user=%s", instance.pk, self.request.user.pk)
        instance.delete()
