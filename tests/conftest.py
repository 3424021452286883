from __future__ import annotations

import copy
import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

os.environ.setdefault("LOCAL_STORE_PATH", os.path.join(tempfile.mkdtemp(), "portfolio.json"))
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "s3cret"
os.environ.pop("ADMIN_PASSWORD_HASH", None)
os.environ.pop("APP_ENV", None)

from admin import DraftRegistry  # noqa: E402
from database import RemoteStoreError  # noqa: E402
from storage import LocalContentStore, MemoryStorage  # noqa: E402
from sync import ContentSynchronizer  # noqa: E402


class FakeRemoteStore:
    """In-memory stand-in for RemoteStore with the same select/insert/upsert surface."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.fail = False
        self.writes = 0
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _check(self) -> None:
        if self.fail:
            raise RemoteStoreError("remote unavailable")

    def select(self, table, filters=None, order=None, limit=None):
        self._check()
        rows = [
            copy.deepcopy(row)
            for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        if order:
            column, _, direction = order.partition(".")
            rows.sort(key=lambda r: r.get(column) or "", reverse=direction == "desc")
        if limit:
            rows = rows[:limit]
        return rows

    def insert(self, table, row):
        self._check()
        rows = self.tables.setdefault(table, [])
        self._clock += timedelta(seconds=1)
        stored = {"id": len(rows) + 1, "created_at": self._clock.isoformat(), **copy.deepcopy(row)}
        rows.append(stored)
        self.writes += 1
        return copy.deepcopy(stored)

    def upsert(self, table, row):
        self._check()
        rows = self.tables.setdefault(table, [])
        stored = copy.deepcopy(row)
        self.tables[table] = [r for r in rows if r.get("id") != stored.get("id")] + [stored]
        self.writes += 1
        return copy.deepcopy(stored)


@pytest.fixture
def remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def local_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def synchronizer(local_storage: MemoryStorage, remote: FakeRemoteStore) -> ContentSynchronizer:
    return ContentSynchronizer(LocalContentStore(local_storage), remote)


@pytest.fixture
def drafts() -> DraftRegistry:
    return DraftRegistry()


@pytest.fixture
def client(synchronizer: ContentSynchronizer, drafts: DraftRegistry):
    from fastapi.testclient import TestClient

    import main

    main.app.dependency_overrides[main.get_synchronizer] = lambda: synchronizer
    main.app.dependency_overrides[main.get_drafts] = lambda: drafts
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "s3cret"})
    assert resp.status_code == 200
    return client
