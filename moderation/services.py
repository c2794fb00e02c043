"""
ORM-facing moderation helpers.

Translates engine decisions into queryset filters and row updates:

* ``visibility_q`` turns a ``VisibilityFilter`` into a ``Q`` object;
* ``find_natural_key_matches`` looks up case-insensitive duplicates;
* ``create_moderated`` runs the create path (conflict check, supersede,
  approval status) for any of the three content kinds;
* ``transition`` is the super-admin status override.
"""
import logging
from typing import Optional

from django.apps import apps
from django.db import IntegrityError, transaction
from django.db.models import Case, IntegerField, Q, Value, When

from .choices import ApprovalStatus, ContentKind
from .engine import (
    Actor,
    ConflictResolution,
    VisibilityFilter,
    decide_approval_status,
    resolve_create_conflict,
)
from .exceptions import Conflict, InvalidArgument, NotFound, Unauthorized

logger = logging.getLogger(__name__)

# APPROVED first, then PENDING, then REJECTED
APPROVAL_RANK = Case(
    When(approval_status=ApprovalStatus.APPROVED, then=Value(0)),
    When(approval_status=ApprovalStatus.PENDING, then=Value(1)),
    default=Value(2),
    output_field=IntegerField(),
)


def visibility_q(visibility: VisibilityFilter) -> Q:
    if visibility.unrestricted:
        return Q()
    combined = None
    for clause in visibility.clauses:
        part = Q()
        if clause.is_public is not None:
            part &= Q(is_public=clause.is_public)
        if clause.approval_status is not None:
            part &= Q(approval_status=clause.approval_status)
        if clause.owner_id is not None:
            part &= Q(owner_id=clause.owner_id)
        combined = part if combined is None else combined | part
    return combined


def natural_key_q(**values) -> Q:
    """OR of case-insensitive equality on every non-empty natural-key field."""
    q = Q()
    for field, value in values.items():
        if value:
            q |= Q(**{f"{field}__iexact": value})
    return q


def find_natural_key_matches(model, **values) -> list:
    """Every row colliding with any of the given natural-key values."""
    q = natural_key_q(**values)
    if not q:
        return []
    return list(model.objects.filter(q).order_by("pk"))


def create_moderated(model, actor: Actor, natural_key: dict, **fields):
    """
    Create a moderated item after resolving natural-key collisions.

    Raises ``Conflict`` when any collision cannot be superseded, or when a
    concurrent create wins the unique constraint.  The supersede delete and
    the create share one transaction.
    """
    is_public = fields.pop("is_public", True)
    model_name = model._meta.model_name
    with transaction.atomic():
        existing = find_natural_key_matches(model, **natural_key)
        try:
            resolution = resolve_create_conflict(actor, existing)
        except Conflict:
            logger.info(
                "Rejected duplicate %s (matches ids=%s) from user=%s",
                model_name, [m.pk for m in existing], actor.user_id if actor else None,
            )
            raise
        if resolution is ConflictResolution.SUPERSEDE:
            logger.info(
                "Superseding rejected %s ids=%s by user=%s",
                model_name, [m.pk for m in existing], actor.user_id,
            )
            model.objects.filter(pk__in=[m.pk for m in existing]).delete()
        try:
            with transaction.atomic():
                return model.objects.create(
                    owner_id=actor.user_id,
                    is_public=is_public,
                    approval_status=decide_approval_status(actor, is_public),
                    **fields,
                )
        except IntegrityError:
            logger.info("Duplicate %s lost a concurrent create for user=%s", model_name, actor.user_id)
            raise Conflict()


def parse_content_kind(value) -> ContentKind:
    try:
        return ContentKind(str(value).lower())
    except ValueError:
        raise InvalidArgument("Invalid type. Must be resource, category, or tag")


def parse_approval_status(value) -> ApprovalStatus:
    try:
        return ApprovalStatus(str(value).upper())
    except ValueError:
        raise InvalidArgument("Invalid status. Must be APPROVED, REJECTED, or PENDING")


def model_for_kind(kind: ContentKind):
    return apps.get_model(kind.model_label)


def transition(actor: Optional[Actor], kind, item_id, target_status):
    """
    Set ``approval_status`` on one item.  Super admins only; every state is
    reachable from every other one and repeating a transition is a no-op.
    """
    if actor is None or not actor.is_super_admin:
        raise Unauthorized("Only super admins can change approval status.")
    status = parse_approval_status(target_status)
    kind = parse_content_kind(kind)
    model = model_for_kind(kind)

    try:
        item = model.objects.get(pk=item_id)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"{kind.label} not found.")

    previous = item.approval_status
    item.approval_status = status
    item.save(update_fields=["approval_status", "updated_at"])
    logger.info(
        "Approval transition %s id=%s %s -> %s by user=%s",
        kind.value, item.pk, previous, status, actor.user_id,
    )
    return item
