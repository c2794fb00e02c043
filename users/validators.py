# users/validators.py
from __future__ import annotations

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from email_validator import EmailNotValidError, validate_email as ev_validate_email

User = get_user_model()


def validate_email_smart(value: str) -> str:
    """
    Validate & normalize an email using the 'email-validator' library.

    DNS deliverability checks only run when STRICT_EMAIL_DNS is enabled.
    Returns the normalized, lowercased address.
    """
    v = (value or "").strip()
    check_deliverability = bool(getattr(settings, "STRICT_EMAIL_DNS", False))
    try:
        info = ev_validate_email(v, check_deliverability=check_deliverability)
    except EmailNotValidError as e:
        raise ValidationError(str(e))
    return info.normalized.lower()


def validate_email_unique(value: str, instance=None) -> str:
    """Normalize the address and enforce case-insensitive uniqueness."""
    v = validate_email_smart(value)
    qs = User.objects.filter(email__iexact=v)
    if instance is not None:
        qs = qs.exclude(pk=getattr(instance, "pk", None))
    if qs.exists():
        raise ValidationError("A user with this email already exists.")
    return v
