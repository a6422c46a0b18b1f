"""
Defensive coercion for documents we did not write ourselves.

Remote rows and imported backups may be partially populated; absent or null
numbers read as 0 and absent or null strings read as "". Optional references
(variant ids, customer ids, price overrides) keep None so that "not set" is
never confused with "zero".
"""
from __future__ import annotations

from typing import Any, Mapping


def as_float(row: Mapping[str, Any], key: str) -> float:
    value = row.get(key)
    if value is None or value == "":
        return 0.0
    return float(value)


def as_int(row: Mapping[str, Any], key: str) -> int:
    value = row.get(key)
    if value is None or value == "":
        return 0
    return int(float(value))


def as_str(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value)


def as_optional_str(row: Mapping[str, Any], key: str) -> str | None:
    value = row.get(key)
    if value is None or value == "":
        return None
    return str(value)


def as_optional_float(row: Mapping[str, Any], key: str) -> float | None:
    value = row.get(key)
    if value is None or value == "":
        return None
    return float(value)
