"""
Pagination utilities for the project.

Listings return a plain array unless the client asks for a window with
``?limit=`` (and optionally ``?offset=``), in which case DRF's
limit/offset envelope is used.
"""
from rest_framework.pagination import LimitOffsetPagination


class OptionalLimitOffsetPagination(LimitOffsetPagination):
    """Limit/offset pagination that is off when no ``limit`` is given."""
    default_limit = None
    max_limit = 100
