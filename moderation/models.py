"""
Abstract base for moderatable content.

``ModeratedContent`` carries the owner's visibility intent (``is_public``)
and the moderation flag (``approval_status``).  Concrete models in the
catalog app add their own ``owner`` foreign key so each kind gets its own
reverse accessor on the user.
"""
from django.db import models

from .choices import ApprovalStatus, VisibilityMode
from .engine import build_visibility_filter
from .services import APPROVAL_RANK, visibility_q


class ModeratedQuerySet(models.QuerySet):
    def visible_to(self, actor, mode=VisibilityMode.DEFAULT):
        return self.filter(visibility_q(build_visibility_filter(actor, mode)))

    def approved_first(self, *ordering):
        return self.annotate(approval_rank=APPROVAL_RANK).order_by("approval_rank", *ordering)

    def public_in_status(self, status):
        return self.filter(is_public=True, approval_status=status)


class ModeratedContent(models.Model):
    is_public = models.BooleanField(default=True)
    approval_status = models.CharField(
        max_length=16,
        choices=ApprovalStatus.choices,
        default=ApprovalStatus.PENDING,
        db_index=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ModeratedQuerySet.as_manager()

    class Meta:
        abstract = True

    def is_visible_to(self, actor) -> bool:
        return build_visibility_filter(actor).matches(self)

    def is_owned_by(self, actor) -> bool:
        return actor is not None and self.owner_id == actor.user_id
