"""
Admin configuration for the users app.

This module unregisters the default `User` admin and re-registers it with
an inline profile form so that display names and roles are editable via
the Django admin.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User

from .models import UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    fields = ("name", "role")


class UserAdmin(BaseUserAdmin):
    inlines = [UserProfileInline]
    list_display = ("username", "email", "profile_role", "is_active", "date_joined")
    list_filter = ("profile__role", "is_active")

    def get_inline_instances(self, request, obj=None):
        # the post_save signal creates the profile for new users
        if obj is None:
            return []
        return super().get_inline_instances(request, obj)

    @admin.display(description="Role", ordering="profile__role")
    def profile_role(self, obj):
        return getattr(getattr(obj, "profile", None), "role", "")


admin.site.unregister(User)
admin.site.register(User, UserAdmin)
