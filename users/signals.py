"""
Signals for the users app.

Create a `UserProfile` for every new `User`.  Django superusers start out
as `SUPER_ADMIN`; everybody else is `GENERAL`.
"""
from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from moderation.choices import Role

from .models import UserProfile

User = get_user_model()


@receiver(post_save, sender=User, dispatch_uid="users_ensure_profile")
def ensure_profile(sender, instance, created, **kwargs):
    """
    Ensure exactly one UserProfile exists for every User.  The role is
    seeded on creation only; later changes belong to the profile.
    """
    role = Role.SUPER_ADMIN if instance.is_superuser else Role.GENERAL
    UserProfile.objects.get_or_create(
        user=instance,
        defaults={"role": role, "name": instance.get_full_name()},
    )
