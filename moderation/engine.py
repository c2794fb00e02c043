"""
Visibility and approval decisions for user-submitted content.

Everything in this module is pure: it looks at an actor, the flags of a
content item and (for creation) an already-found duplicate, and returns a
decision.  Reading and writing rows is left to ``moderation.services`` and
the catalog views, which translate these decisions into ORM calls.

Visibility rules in short:

* anonymous visitors see public items that are ``APPROVED``;
* a ``GENERAL`` user additionally sees everything they own, whatever its
  status or visibility;
* a ``SUPER_ADMIN`` sees everything.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .choices import ApprovalStatus, Role, VisibilityMode
from .exceptions import Conflict, Unauthorized

DUPLICATE_DETAIL = "duplicate name or slug"


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: str = Role.GENERAL

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    @classmethod
    def from_user(cls, user) -> Optional["Actor"]:
        """
        Build an actor from a Django user; anonymous users map to ``None``.

        The role comes from ``profile.role`` only.  ``is_superuser`` is
        consulted just for a user whose profile does not exist yet, the
        same default the profile is seeded with.
        """
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        profile = getattr(user, "profile", None)
        if profile is None:
            role = Role.SUPER_ADMIN if getattr(user, "is_superuser", False) else Role.GENERAL
        else:
            role = profile.role or Role.GENERAL
        return cls(user_id=user.pk, role=role)


def _is_super_admin(actor: Optional[Actor]) -> bool:
    return actor is not None and actor.is_super_admin


# ---------------------------
# Approval status
# ---------------------------

def decide_approval_status(actor: Optional[Actor], is_public: bool) -> ApprovalStatus:
    """Status to store on a newly created item."""
    if is_public and not _is_super_admin(actor):
        return ApprovalStatus.PENDING
    return ApprovalStatus.APPROVED


def decide_approval_status_on_visibility_change(
    actor: Optional[Actor],
    new_is_public: bool,
    previous_status: str,
) -> ApprovalStatus:
    """
    Status to store when an edit flips ``is_public``.

    Going public as a non-super-admin always re-enters review, even from
    ``APPROVED`` or ``REJECTED``.  Going private keeps the stored status
    dormant, and super admins keep whatever status the item had.
    """
    if new_is_public and not _is_super_admin(actor):
        return ApprovalStatus.PENDING
    return ApprovalStatus(previous_status)


# ---------------------------
# Visibility filter
# ---------------------------

@dataclass(frozen=True)
class VisibilityClause:
    """A conjunction of field constraints; ``None`` means unconstrained."""
    is_public: Optional[bool] = None
    approval_status: Optional[str] = None
    owner_id: Optional[int] = None

    def matches(self, item: Any) -> bool:
        if self.is_public is not None and bool(item.is_public) != self.is_public:
            return False
        if self.approval_status is not None and item.approval_status != self.approval_status:
            return False
        if self.owner_id is not None and item.owner_id != self.owner_id:
            return False
        return True


@dataclass(frozen=True)
class VisibilityFilter:
    """
    Disjunction of clauses.  ``clauses=None`` is the unrestricted filter
    (matches every item); an empty tuple would match nothing and is never
    produced here.
    """
    clauses: Optional[tuple[VisibilityClause, ...]] = None

    @property
    def unrestricted(self) -> bool:
        return self.clauses is None

    def matches(self, item: Any) -> bool:
        if self.clauses is None:
            return True
        return any(clause.matches(item) for clause in self.clauses)


PUBLIC_APPROVED = VisibilityClause(is_public=True, approval_status=ApprovalStatus.APPROVED)


def build_visibility_filter(
    actor: Optional[Actor],
    mode: str = VisibilityMode.DEFAULT,
) -> VisibilityFilter:
    mode = VisibilityMode(mode)

    if mode == VisibilityMode.PENDING_ONLY:
        if not _is_super_admin(actor):
            raise Unauthorized("Only super admins can list pending items.")
        return VisibilityFilter(
            clauses=(VisibilityClause(is_public=True, approval_status=ApprovalStatus.PENDING),)
        )

    if mode == VisibilityMode.PRIVATE_ONLY:
        if actor is None:
            raise Unauthorized("Sign in to list your private items.")
        return VisibilityFilter(clauses=(VisibilityClause(is_public=False, owner_id=actor.user_id),))

    if actor is None:
        return VisibilityFilter(clauses=(PUBLIC_APPROVED,))
    if actor.is_super_admin:
        return VisibilityFilter()
    return VisibilityFilter(clauses=(PUBLIC_APPROVED, VisibilityClause(owner_id=actor.user_id)))


def visibility_mode_from_flags(show_private: bool = False, show_pending: bool = False) -> VisibilityMode:
    if show_pending:
        return VisibilityMode.PENDING_ONLY
    if show_private:
        return VisibilityMode.PRIVATE_ONLY
    return VisibilityMode.DEFAULT


# ---------------------------
# Create-time conflicts
# ---------------------------

class ConflictResolution(enum.Enum):
    PROCEED = "proceed"
    SUPERSEDE = "supersede"


def resolve_create_conflict(actor: Optional[Actor], existing_matches: Iterable[Any] = ()) -> ConflictResolution:
    """
    Decide what to do with case-insensitive natural-key collisions.

    ``existing_matches`` holds every colliding item (anything with an
    ``approval_status``).  A super admin may replace them only when all of
    them are ``REJECTED``; any other collision raises ``Conflict``.
    """
    matches = list(existing_matches or ())
    if not matches:
        return ConflictResolution.PROCEED
    if _is_super_admin(actor) and all(m.approval_status == ApprovalStatus.REJECTED for m in matches):
        return ConflictResolution.SUPERSEDE
    raise Conflict(DUPLICATE_DETAIL)
