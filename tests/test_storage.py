from __future__ import annotations

import json
from pathlib import Path

import pytest

from defaults import default_document
from storage import (
    ADMIN_FLAG_KEY,
    CONTENT_KEYS,
    REVIEW_FLAG_KEY,
    FileStorage,
    KeyValueStorage,
    LocalContentStore,
    MemoryStorage,
    SessionFlags,
    SessionStorage,
)


def test_read_document_without_keys_returns_defaults() -> None:
    store = LocalContentStore(MemoryStorage())

    assert store.read_document() == default_document()


def test_write_document_uses_one_key_per_field() -> None:
    storage = MemoryStorage()
    store = LocalContentStore(storage)
    doc = default_document()

    store.write_document(doc)

    for field, key in CONTENT_KEYS.items():
        assert json.loads(storage.get_item(key)) == doc.to_wire()[field]
    assert store.read_document() == doc


def test_read_document_ignores_malformed_key() -> None:
    storage = MemoryStorage({"portfolio_projects": "{not-json", "portfolio_about": json.dumps({"title": "Stored"})})
    store = LocalContentStore(storage)

    doc = store.read_document()

    assert doc.projects == default_document().projects
    assert doc.about_data.title == "Stored"


def test_read_document_tags_legacy_service_items() -> None:
    services = {
        "Web Development": [{"name": "Shop", "image": "a.png", "link": "#", "tech": "React"}],
        "Video Editing": [{"title": "Promo", "url": "#", "thumbnail": "t.png"}],
    }
    store = LocalContentStore(MemoryStorage({"portfolio_services": json.dumps(services)}))

    doc = store.read_document()

    assert doc.service_details["Web Development"][0].kind == "showcase"
    assert doc.service_details["Video Editing"][0].kind == "media"


def test_file_storage_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "portfolio.json"
    FileStorage(str(path)).set_item("portfolio_contact", '{"email": "a@b.c"}')

    reopened = FileStorage(str(path))

    assert reopened.get_item("portfolio_contact") == '{"email": "a@b.c"}'
    reopened.remove_item("portfolio_contact")
    assert FileStorage(str(path)).get_item("portfolio_contact") is None


def test_file_storage_starts_empty_on_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "portfolio.json"
    path.write_text("[1, 2")

    assert FileStorage(str(path)).get_item("portfolio_projects") is None


def test_session_flags_round_trip_through_storage() -> None:
    session: dict[str, str] = {}
    storage = SessionStorage(session)

    SessionFlags(is_admin=True, has_submitted_review=True).save(storage)

    assert session == {ADMIN_FLAG_KEY: "true", REVIEW_FLAG_KEY: "true"}
    assert SessionFlags.load(storage) == SessionFlags(is_admin=True, has_submitted_review=True)

    SessionFlags().save(storage)
    assert session == {}


def test_key_value_storage_subclass_must_implement_every_method() -> None:
    class GetOnly(KeyValueStorage):
        def get_item(self, key):
            return None

    with pytest.raises(TypeError):
        GetOnly()


def test_write_field_touches_only_its_key() -> None:
    storage = MemoryStorage()
    doc = default_document()

    LocalContentStore(storage).write_field(doc, "reviews")

    assert json.loads(storage.get_item("portfolio_reviews")) == doc.to_wire()["reviews"]
    assert storage.get_item("portfolio_projects") is None
    with pytest.raises(KeyError):
        LocalContentStore(storage).write_field(doc, "messages")
