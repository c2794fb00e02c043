"""
Models for the users app.

A `UserProfile` extends the built-in `auth.User` with a display name and
the role the moderation engine reads (`GENERAL` or `SUPER_ADMIN`).  The
profile is created automatically via signals when a new user is saved.
"""
from django.contrib.auth.models import User
from django.db import models

from moderation.choices import Role


class UserProfile(models.Model):
    """Extension of Django's built-in User model."""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.GENERAL, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Profile<{self.user.username}>"

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN
