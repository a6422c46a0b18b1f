# Overview: Two-way cloud reconciliation (push = upsert local rows, pull = replace local state).

"""
Push:
- Flattens products/variants, customers, sales/items into the five remote
  row sets and upserts them one table at a time, parents first.
- Upserts are keyed by id, so pushing unchanged state twice is a no-op.
- The first failing table aborts the push with SyncError. Tables already
  written stay written; push is best-effort, not transactional.

Pull:
- Fetches all five tables concurrently and waits for all of them; any failure
  fails the whole pull and local state is untouched.
- Rebuilds nested entities (orphan variants/items are dropped) and replaces
  the local products, customers and sales wholesale. It is not a merge, so
  unpushed local edits are lost.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from ..models import Customer, Product, Sale
from .register_service import Register
from .sync_rows import TABLES, flatten_state, rebuild_state

logger = logging.getLogger(__name__)

PUSH = "push"
PULL = "pull"


class SyncError(Exception):
    """Remote operation failed; wraps the first failing table's cause."""
    def __init__(self, message: str, *, table: str | None = None, cause: BaseException | None = None):
        super().__init__(message)
        self.table = table
        self.cause = cause

    @property
    def details(self) -> dict:
        return {"table": self.table}


class SyncNotConfiguredError(SyncError):
    """Cloud sync requested but no remote store is configured."""


@dataclass
class SyncResult:
    direction: str
    counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"direction": self.direction, "counts": dict(self.counts)}


@dataclass
class PulledState:
    products: list[Product]
    customers: list[Customer]
    sales: list[Sale]
    counts: dict[str, int]


class CloudSync:
    def __init__(self, remote):
        self.remote = remote

    def _require_remote(self):
        if self.remote is None:
            raise SyncNotConfiguredError("Cloud sync is not configured (set Supabase URL and anon key)")
        return self.remote

    def push(self, register: Register) -> SyncResult:
        remote = self._require_remote()
        logger.info("Push started")
        with register.lock:
            tables = flatten_state(
                register.catalog.products,
                register.customers.customers,
                register.history.sales,
            )

        result = SyncResult(direction=PUSH)
        for table in TABLES:
            rows = tables[table]
            try:
                if rows:
                    remote.upsert(table, rows)
            except Exception as exc:
                logger.error("Push failed on %s after %d row(s) staged: %s", table, len(rows), exc)
                raise SyncError(f"Push failed on {table}: {exc}", table=table, cause=exc) from exc
            result.counts[table] = len(rows)
        logger.info("Push complete: %s", result.counts)
        return result

    def fetch(self) -> PulledState:
        """Fetch and rebuild remote state without touching local state."""
        remote = self._require_remote()
        logger.info("Pull started")
        with ThreadPoolExecutor(max_workers=len(TABLES), thread_name_prefix="gearpos-pull") as pool:
            futures = {table: pool.submit(remote.select_all, table) for table in TABLES}

        fetched: dict[str, list[dict]] = {}
        for table in TABLES:
            try:
                rows = futures[table].result()
            except Exception as exc:
                logger.error("Pull failed on %s: %s", table, exc)
                raise SyncError(f"Pull failed on {table}: {exc}", table=table, cause=exc) from exc
            if not isinstance(rows, list):
                raise SyncError(f"Pull failed on {table}: expected a list of rows", table=table)
            fetched[table] = rows

        try:
            products, customers, sales = rebuild_state(fetched)
        except (AttributeError, TypeError, ValueError) as exc:
            raise SyncError(f"Remote rows are malformed: {exc}", cause=exc) from exc

        return PulledState(
            products=products,
            customers=customers,
            sales=sales,
            counts={table: len(rows) for table, rows in fetched.items()},
        )

    def pull(self, register: Register) -> SyncResult:
        pulled = self.fetch()
        register.replace_state(products=pulled.products, customers=pulled.customers, sales=pulled.sales)
        logger.info(
            "Pull complete: %d products, %d customers, %d sales",
            len(pulled.products), len(pulled.customers), len(pulled.sales),
        )
        return SyncResult(direction=PULL, counts=pulled.counts)


def sync(direction: str, register: Register, remote) -> SyncResult:
    direction = (direction or "").strip().lower()
    service = CloudSync(remote)
    if direction == PUSH:
        return service.push(register)
    if direction == PULL:
        return service.pull(register)
    raise ValueError(f"Unknown sync direction: {direction!r}")
