"""
Authentication and registration endpoints for the users app.

This module exposes session login/logout, JWT obtain/refresh by email and
the registration endpoint.  Included under ``/api/auth/``.
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    CSRFCookieView,
    EmailTokenObtainPairView,
    RegisterView,
    SessionLoginView,
    SessionLogoutView,
    SessionMeView,
)

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),

    # Email + password JWT login
    path("token/", EmailTokenObtainPairView.as_view(), name="token_obtain_pair_email"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),

    # Session auth helpers
    path("session/csrf/", CSRFCookieView.as_view(), name="session_csrf"),
    path("session/login/", SessionLoginView.as_view(), name="session_login"),
    path("session/logout/", SessionLogoutView.as_view(), name="session_logout"),
    path("session/me/", SessionMeView.as_view(), name="session_me"),
]
