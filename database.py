"""
Remote store: hosted Postgres exposed through its REST endpoint (`/rest/v1/<table>`).

Tables:
- portfolio: {id, content, updated_at}, a single row holding the whole ContentDocument
- messages:  {id, name, email, subject, message, created_at}, append-only

`db` is None when SUPABASE_URL / SUPABASE_ANON_KEY are not set; callers treat
that as "remote unavailable".
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

logger = logging.getLogger(__name__)

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
REMOTE_TIMEOUT = float(os.getenv("REMOTE_TIMEOUT", "10"))


class RemoteStoreError(Exception):
    pass


class RemoteStore:
    def __init__(self, url: str, key: str, timeout: float = REMOTE_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        })

    def _request(self, method: str, table: str, *, params=None, json=None, prefer: Optional[str] = None) -> Any:
        headers = {"Prefer": prefer} if prefer else {}
        try:
            r = self.session.request(
                method,
                f"{self.base_url}/{table}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteStoreError(f"{method} {table} failed: {e}") from e
        if r.status_code >= 400:
            raise RemoteStoreError(f"{method} {table} returned {r.status_code}: {r.text[:200]}")
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise RemoteStoreError(f"{method} {table} returned invalid JSON") from e

    def select(self, table: str, filters: Optional[Dict[str, Any]] = None, order: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = order
        if limit:
            params["limit"] = limit
        rows = self._request("GET", table, params=params)
        if not isinstance(rows, list):
            raise RemoteStoreError(f"GET {table} did not return a list")
        return rows

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._request("POST", table, json=[row], prefer="return=representation")
        return rows[0] if rows else row

    def upsert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._request(
            "POST",
            table,
            json=[row],
            prefer="resolution=merge-duplicates,return=representation",
        )
        return rows[0] if rows else row


db: Optional[RemoteStore] = RemoteStore(SUPABASE_URL, SUPABASE_ANON_KEY) if SUPABASE_URL and SUPABASE_ANON_KEY else None


def _as_row(data) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_none=True)
    return dict(data)


def create_document(table: str, data, store: Optional[RemoteStore] = None) -> Dict[str, Any]:
    """Insert a row. Raises RemoteStoreError, including when no remote store is configured."""
    store = store or db
    if store is None:
        raise RemoteStoreError("remote store not configured")
    return store.insert(table, _as_row(data))


def upsert_document(table: str, data, store: Optional[RemoteStore] = None) -> Dict[str, Any]:
    store = store or db
    if store is None:
        raise RemoteStoreError("remote store not configured")
    return store.upsert(table, _as_row(data))


def get_documents(table: str, filter_dict: Optional[Dict[str, Any]] = None, limit: Optional[int] = None,
                  order: Optional[str] = None, store: Optional[RemoteStore] = None) -> List[Dict[str, Any]]:
    store = store or db
    if store is None:
        raise RemoteStoreError("remote store not configured")
    return store.select(table, filter_dict, order=order, limit=limit)
