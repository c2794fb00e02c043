from rest_framework.permissions import SAFE_METHODS, BasePermission

from .engine import Actor


class IsSuperAdmin(BasePermission):
    """Only actors with the SUPER_ADMIN role."""
    message = "Unauthorized"

    def has_permission(self, request, view):
        actor = Actor.from_user(getattr(request, "user", None))
        return bool(actor and actor.is_super_admin)


class IsOwnerOrSuperAdmin(BasePermission):
    """
    Reads are governed by the visibility filter on the queryset.
    Writes require the item's owner or a super admin.
    """
    message = "Forbidden"

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        actor = Actor.from_user(getattr(request, "user", None))
        if actor is None:
            return False
        return actor.is_super_admin or obj.is_owned_by(actor)
