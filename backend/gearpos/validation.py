from __future__ import annotations

from typing import Any


class ValidationError(ValueError):
    """400-level input problem (missing required field, bad number, ...)."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate SKU)."""


class NotFoundError(LookupError):
    """404-level lookup miss (unknown SKU, product, customer, cart line)."""


def require_text(payload: dict, field: str, label: str | None = None) -> str:
    """Return a stripped, non-blank string field or raise ValidationError."""
    value = payload.get(field)
    if value is None or str(value).strip() == "":
        raise ValidationError(f"{label or field} is required")
    return str(value).strip()


def optional_text(payload: dict, field: str, default: str = "") -> str:
    value = payload.get(field)
    if value is None:
        return default
    return str(value).strip()


def coerce_number(value: Any, field: str, *, minimum: float | None = 0) -> float:
    """
    Coerce form/JSON input to a float.

    - None / "" -> 0
    - bools are rejected (True is not a price)
    - values below ``minimum`` are rejected
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if number != number:  # NaN
        raise ValidationError(f"{field} must be a number")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be >= {minimum:g}")
    return number


def coerce_optional_number(value: Any, field: str) -> float | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_number(value, field)


def coerce_stock(value: Any, field: str = "stock") -> int:
    """Stock counts are non-negative integers; "12" is accepted, 12.5 is not."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer, not a decimal")
        value = int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if "." in stripped or "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer")
        try:
            value = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < 0:
        raise ValidationError(f"{field} must be >= 0")
    return value
