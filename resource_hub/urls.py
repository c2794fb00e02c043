"""
URL configuration for the resource hub backend.
Catalog endpoints live under `/api/`, authentication under `/api/auth/`
and super-admin tools (approval queue, user management) under `/api/admin/`.
"""

from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.routers import SimpleRouter

from resource_hub.views import index
from users.views import AdminUserViewSet

admin_router = SimpleRouter()
admin_router.register(r"users", AdminUserViewSet, basename="admin-user")

urlpatterns = [
    path("", index, name="index"),
    path("admin/", admin.site.urls),

    path("api/", RedirectView.as_view(pattern_name="swagger-ui", permanent=False)),

    # Swagger
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # Auth endpoints
    path("api/auth/", include("users.urls")),

    # Super admin
    path("api/admin/", include("moderation.urls")),
    path("api/admin/", include(admin_router.urls)),

    path("api/", include("catalog.urls")),
]
