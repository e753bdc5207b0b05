from __future__ import annotations
"""Reusable request validation helpers.

Presence and range checks only; every failure aborts with 400 and a short
description naming the field.
"""
import math
import uuid
from datetime import date, datetime
from typing import Any, Iterable, Optional
from flask import abort


def validate_choice(value: Any, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that value is inside allowed.

    Returns the value (to enable inline usage) or aborts with 400.
    """
    if value not in allowed:
        abort(400, description=f"{field_name} invalid")
    return value


def require_text(data: dict, field_name: str) -> str:
    value = data.get(field_name)
    if not isinstance(value, str) or not value.strip():
        abort(400, description=f"{field_name} required")
    return value.strip()


def parse_amount(raw: Any, field_name: str, *, minimum: float = 0, allow_minimum: bool = True) -> float:
    """Coerce a JSON number (or numeric string) to a 2-decimal float within range."""
    if raw is None or isinstance(raw, bool):
        abort(400, description=f"{field_name} required")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        abort(400, description=f"{field_name} must be a number")
    if not math.isfinite(value):
        abort(400, description=f"{field_name} must be a number")
    value = round(value, 2)
    if value < minimum or (value == minimum and not allow_minimum):
        op = '>=' if allow_minimum else '>'
        abort(400, description=f"{field_name} must be {op} {minimum:g}")
    return value


def parse_date(raw: Any, field_name: str = 'date', default: Optional[date] = None) -> date:
    if raw in (None, ''):
        if default is not None:
            return default
        abort(400, description=f"{field_name} required")
    try:
        return datetime.strptime(str(raw), '%Y-%m-%d').date()
    except ValueError:
        abort(400, description=f"{field_name} must be YYYY-MM-DD")


def parse_bool(raw: Any, field_name: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.lower() in ('true', 'false'):
        return raw.lower() == 'true'
    abort(400, description=f"{field_name} must be true or false")


def is_uuid(value: Any) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def optional_text(data: dict, field_name: str) -> Optional[str]:
    value = data.get(field_name)
    if value is None:
        return None
    if not isinstance(value, str):
        abort(400, description=f"{field_name} must be a string")
    return value.strip() or None


__all__ = ['validate_choice', 'require_text', 'parse_amount', 'parse_date', 'parse_bool', 'is_uuid', 'optional_text']
