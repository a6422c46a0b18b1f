# Overview: Remote store transport (Supabase / PostgREST over HTTP).

"""
Remote store protocol used by the sync service (duck-typed):

    select_all(table: str) -> list[dict]
    upsert(table: str, rows: list[dict]) -> None

SupabaseRestStore talks to PostgREST's REST endpoint with the project's anon
key. Upserts use ``on_conflict=id`` with ``resolution=merge-duplicates``, so
re-sending the same rows updates in place and never duplicates them.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """Raised when the remote store rejects a request or cannot be reached."""
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _error_message_from_response(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text.strip() or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or body.get("hint") or resp.text
    return resp.text


class SupabaseRestStore:
    def __init__(
        self,
        url: str,
        anon_key: str,
        *,
        timeout: float = 20.0,
        page_size: int = 1000,
        upsert_chunk_size: int = 500,
    ):
        if not url or not anon_key:
            raise ValueError("Supabase URL and anon key are required")
        self.base_url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.page_size = page_size
        self.upsert_chunk_size = upsert_chunk_size

    def _endpoint(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, table: str, **kwargs: Any) -> requests.Response:
        try:
            resp = requests.request(method, self._endpoint(table), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise RemoteStoreError(f"{table}: {exc}") from exc
        if resp.status_code >= 400:
            raise RemoteStoreError(
                f"{table}: {_error_message_from_response(resp)}",
                status_code=resp.status_code,
            )
        return resp

    def select_all(self, table: str) -> list[dict]:
        """Fetch every row of ``table``, paging with limit/offset."""
        rows: list[dict] = []
        offset = 0
        while True:
            resp = self._request(
                "GET",
                table,
                headers=self._headers(),
                params={"select": "*", "order": "id.asc", "limit": self.page_size, "offset": offset},
            )
            try:
                page = resp.json()
            except ValueError as exc:
                raise RemoteStoreError(f"{table}: response was not JSON") from exc
            if not isinstance(page, list):
                raise RemoteStoreError(f"{table}: expected a list of rows")
            rows.extend(page)
            if len(page) < self.page_size:
                break
            offset += self.page_size
        logger.debug("Fetched %d rows from %s", len(rows), table)
        return rows

    def upsert(self, table: str, rows: list[dict]) -> None:
        """Insert-or-update ``rows`` by primary key ``id``."""
        headers = self._headers({
            "Content-Type": "application/json",
            "Prefer": "resolution=merge-duplicates,return=minimal",
        })
        for start in range(0, len(rows), self.upsert_chunk_size):
            chunk = rows[start:start + self.upsert_chunk_size]
            self._request("POST", table, headers=headers, params={"on_conflict": "id"}, json=chunk)
        logger.debug("Upserted %d rows into %s", len(rows), table)


def build_remote_store(settings, config: Mapping[str, Any]) -> SupabaseRestStore | None:
    """The remote capability, or None when credentials are not configured."""
    if not settings.sync_configured:
        return None
    return SupabaseRestStore(
        settings.supabase_url,
        settings.supabase_anon_key,
        timeout=float(config.get("SYNC_TIMEOUT_SECONDS", 20)),
        page_size=int(config.get("SYNC_PAGE_SIZE", 1000)),
    )
