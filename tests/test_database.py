from __future__ import annotations

import json

import pytest
import requests

import database
from database import RemoteStore, RemoteStoreError


class _Resp:
    def __init__(self, status: int, payload=None) -> None:
        self.status_code = status
        self.content = b"" if payload is None else json.dumps(payload).encode()
        self.text = self.content.decode()

    def json(self):
        return json.loads(self.content)


class _Session:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response


def test_select_builds_rest_query() -> None:
    session = _Session(_Resp(200, [{"id": 1}]))
    store = RemoteStore("https://proj.example.co/", "anon", session=session)

    rows = store.select("portfolio", {"id": 1}, order="created_at.desc", limit=1)

    assert rows == [{"id": 1}]
    call = session.calls[0]
    assert call["url"] == "https://proj.example.co/rest/v1/portfolio"
    assert call["params"] == {"select": "*", "id": "eq.1", "order": "created_at.desc", "limit": 1}
    assert session.headers["apikey"] == "anon"
    assert session.headers["Authorization"] == "Bearer anon"


def test_upsert_asks_for_merge_duplicates() -> None:
    session = _Session(_Resp(201, [{"id": 1, "content": {}}]))
    store = RemoteStore("https://proj.example.co", "anon", session=session)

    store.upsert("portfolio", {"id": 1, "content": {}})

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["json"] == [{"id": 1, "content": {}}]
    assert "resolution=merge-duplicates" in call["headers"]["Prefer"]


def test_http_error_and_transport_error_raise_remote_store_error() -> None:
    failing = RemoteStore("https://p.example.co", "k", session=_Session(_Resp(401, {"message": "bad key"})))
    with pytest.raises(RemoteStoreError, match="401"):
        failing.select("messages")

    offline = RemoteStore("https://p.example.co", "k", session=_Session(error=requests.ConnectionError("down")))
    with pytest.raises(RemoteStoreError, match="down"):
        offline.insert("messages", {"name": "x"})


def test_helpers_require_configured_store(monkeypatch) -> None:
    monkeypatch.setattr(database, "db", None)

    with pytest.raises(RemoteStoreError, match="not configured"):
        database.get_documents("messages")
    with pytest.raises(RemoteStoreError, match="not configured"):
        database.create_document("messages", {"name": "x"})
