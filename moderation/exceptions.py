"""
Error taxonomy for the moderation layer.

Each error is a DRF ``APIException`` so views can let it propagate and the
default exception handler renders ``{"detail": ...}`` with the matching
status code.  None of these are retried: they are caused by input or
state, never by infrastructure.
"""
from rest_framework import exceptions, status


class Unauthorized(exceptions.PermissionDenied):
    default_detail = "You do not have permission to perform this action."
    default_code = "unauthorized"


class InvalidArgument(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid argument."
    default_code = "invalid_argument"


class Conflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "duplicate name or slug"
    default_code = "conflict"


class NotFound(exceptions.NotFound):
    default_code = "not_found"
