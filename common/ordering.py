"""
Translate ``sort_field`` / ``sort_order`` query parameters into ORM
ordering.  Only fields listed by the view are accepted; camelCase names
(``createdAt``) are accepted as aliases of their snake_case form.
"""
import re

from rest_framework.exceptions import ValidationError

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(value: str) -> str:
    return _CAMEL_RE.sub("_", value).lower()


def ordering_from_params(params, allowed: dict, default_field: str, default_order: str = "asc") -> list:
    field = _snake((params.get("sort_field") or params.get("sortField") or default_field).strip())
    order = (params.get("sort_order") or params.get("sortOrder") or default_order).strip().lower()

    if field not in allowed:
        raise ValidationError({"sort_field": f"Unsupported sort field '{field}'."})
    if order not in ("asc", "desc"):
        raise ValidationError({"sort_order": "Must be 'asc' or 'desc'."})

    prefix = "-" if order == "desc" else ""
    return [f"{prefix}{allowed[field]}"]
