# Overview: Whole-snapshot load/save against the state_snapshots table.

from __future__ import annotations

import json
import logging
from typing import Any

from ..extensions import db
from ..models import StateSnapshot
from .concurrency import run_with_retry

logger = logging.getLogger(__name__)

SNAPSHOT_KEYS = ("settings", "products", "customers", "sales")


def _json_dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def load_snapshot() -> dict | None:
    """
    Read every stored key back into one snapshot dict.

    Returns None when nothing has been saved yet. A key whose payload is not
    valid JSON is skipped with a warning and falls back to its default.
    """
    rows = db.session.query(StateSnapshot).filter(StateSnapshot.key.in_(SNAPSHOT_KEYS)).all()
    if not rows:
        return None
    snapshot: dict[str, Any] = {}
    for row in rows:
        try:
            snapshot[row.key] = json.loads(row.payload_json)
        except ValueError:
            logger.warning("Stored snapshot key %r is not valid JSON; using defaults", row.key)
    return snapshot


def save_snapshot(snapshot: dict) -> None:
    """Overwrite each key present in ``snapshot`` in a single commit."""
    def _op():
        for key in SNAPSHOT_KEYS:
            if key not in snapshot:
                continue
            payload = _json_dumps(snapshot[key])
            row = db.session.get(StateSnapshot, key)
            if row is None:
                db.session.add(StateSnapshot(key=key, payload_json=payload))
            else:
                row.payload_json = payload
        db.session.commit()

    run_with_retry(_op)


def clear_snapshot() -> None:
    def _op():
        db.session.query(StateSnapshot).delete()
        db.session.commit()

    run_with_retry(_op)
