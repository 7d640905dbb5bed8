"""
Helpers that keep the display ``name`` of leads and customers consistent with
their ``first_name`` / ``last_name`` parts.

All functions are pure. Records may be dicts or model instances.
"""
import copy
from typing import Any, Optional, Tuple


def _get(record: Any, field: str) -> Optional[str]:
    if isinstance(record, dict):
        return record.get(field)
    return getattr(record, field, None)


def generate_full_name(first_name: Optional[str] = None, last_name: Optional[str] = None) -> str:
    """Join the trimmed, non-empty name parts with a single space"""
    first = (first_name or "").strip()
    last = (last_name or "").strip()

    if not first and not last:
        return ""
    if not first:
        return last
    if not last:
        return first
    return f"{first} {last}"


def ensure_name_field(record: Any) -> Any:
    """
    Return a copy of ``record`` with ``name`` derived from its name parts.

    Dicts come back as a new dict, other objects as a shallow copy; the input
    is never modified. Records without any name part are returned unchanged.
    """
    first = _get(record, "first_name")
    last = _get(record, "last_name")
    if not first and not last:
        return record

    name = generate_full_name(first, last)
    if isinstance(record, dict):
        return {**record, "name": name}
    updated = copy.copy(record)
    updated.name = name
    return updated


def is_name_consistent(record: Any) -> bool:
    first = _get(record, "first_name")
    last = _get(record, "last_name")
    if not first or not last:
        return True
    return _get(record, "name") == generate_full_name(first, last)


def split_full_name(name: Optional[str]) -> Tuple[str, str]:
    """Split a legacy full name on its first whitespace run"""
    parts = (name or "").strip().split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()
