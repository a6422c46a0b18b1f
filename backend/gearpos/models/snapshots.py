from __future__ import annotations

from ..extensions import db


class StateSnapshot(db.Model):
    """
    Whole-object key/value blob store for register state.

    One row per top-level snapshot key (settings, products, customers, sales);
    every save rewrites the full JSON payload of each key. There are no
    incremental updates.
    """
    __tablename__ = "state_snapshots"

    key = db.Column(db.String(32), primary_key=True)
    payload_json = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "payload_json": self.payload_json,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
