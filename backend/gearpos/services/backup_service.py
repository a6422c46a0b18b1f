# Overview: JSON backup export/import of the whole register state.

from __future__ import annotations

import json
import logging
from datetime import datetime

from ..models import Customer, Product, Sale
from ..time_utils import localnow
from .register_service import Register
from .settings_service import StoreSettings

logger = logging.getLogger(__name__)

BACKUP_KEYS = ("settings", "products", "customers", "sales")


class ParseError(ValueError):
    """Raised when a backup document cannot be parsed."""


def backup_filename(now: datetime | None = None) -> str:
    now = now or localnow()
    return f"gearpos-backup-{now:%Y%m%d-%H%M%S}.json"


def export_document(register: Register) -> str:
    return json.dumps(register.to_snapshot(), indent=2, ensure_ascii=False)


def _parse_list(data: dict, key: str, factory):
    raw = data[key]
    if not isinstance(raw, list):
        raise ParseError(f"'{key}' must be a list")
    parsed = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ParseError(f"'{key}[{index}]' must be an object")
        try:
            parsed.append(factory(entry))
        except (KeyError, TypeError, ValueError) as exc:
            raise ParseError(f"'{key}[{index}]' is malformed: {exc}") from exc
    return parsed


def parse_document(text: str | bytes, defaults: StoreSettings) -> dict:
    """
    Parse a backup document into entities without touching any state.

    Each top-level field is optional; only fields present come back.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Invalid JSON file: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError("Backup must be a JSON object")

    parsed: dict = {}
    if data.get("settings") is not None:
        try:
            parsed["settings"] = StoreSettings.from_dict(data["settings"], defaults)
        except (TypeError, ValueError) as exc:
            raise ParseError(f"'settings' is malformed: {exc}") from exc
    if data.get("products") is not None:
        parsed["products"] = _parse_list(data, "products", Product.from_dict)
    if data.get("customers") is not None:
        parsed["customers"] = _parse_list(data, "customers", Customer.from_dict)
    if data.get("sales") is not None:
        parsed["sales"] = _parse_list(data, "sales", Sale.from_dict)
    return parsed


def import_document(register: Register, text: str | bytes) -> list[str]:
    """
    Replace register state field-by-field from a backup document.

    A document missing a field leaves that part of the state untouched.
    Nothing is replaced unless the whole document parses.
    Returns the list of imported field names.
    """
    parsed = parse_document(text, register.settings)
    register.replace_state(**parsed)
    imported = [key for key in BACKUP_KEYS if key in parsed]
    logger.info("Backup imported: %s", ", ".join(imported) or "nothing")
    return imported
