from __future__ import annotations

from defaults import default_document
from schemas import MessageCreate
from storage import LocalContentStore, MemoryStorage
from sync import ContentSynchronizer, SyncOutcome


def test_load_without_remote_row_returns_none(synchronizer: ContentSynchronizer) -> None:
    assert synchronizer.load() is None
    assert synchronizer.current() == default_document()


def test_commit_then_load_round_trips(synchronizer: ContentSynchronizer) -> None:
    doc = default_document()
    doc.about_data.title = "Round Trip"

    result = synchronizer.commit(doc)

    assert result.outcome is SyncOutcome.SYNCED
    assert synchronizer.load() == doc


def test_commit_twice_is_an_upsert(synchronizer: ContentSynchronizer, remote) -> None:
    doc = default_document()

    synchronizer.commit(doc)
    first = [dict(row, updated_at=None) for row in remote.tables["portfolio"]]
    synchronizer.commit(doc)
    second = [dict(row, updated_at=None) for row in remote.tables["portfolio"]]

    assert len(second) == 1
    assert first == second


def test_commit_keeps_local_write_when_remote_fails(synchronizer: ContentSynchronizer, remote, local_storage) -> None:
    remote.fail = True
    doc = default_document()
    doc.about_data.title = "Local Only"

    result = synchronizer.commit(doc)

    assert result.outcome is SyncOutcome.LOCAL_ONLY
    assert "remote unavailable" in result.error
    assert "remote sync failed" in result.message
    assert LocalContentStore(local_storage).read_document().about_data.title == "Local Only"


def test_commit_without_remote_is_local_only() -> None:
    storage = MemoryStorage()
    sync = ContentSynchronizer(LocalContentStore(storage), None)

    result = sync.commit(default_document())

    assert result.outcome is SyncOutcome.LOCAL_ONLY
    assert storage.get_item("portfolio_projects")


def test_load_falls_back_on_remote_failure_and_malformed_content(synchronizer: ContentSynchronizer, remote) -> None:
    remote.fail = True
    assert synchronizer.load() is None

    remote.fail = False
    remote.tables["portfolio"] = [{"id": 1, "content": {"projects": "not-a-list"}}]
    assert synchronizer.load() is None
    assert synchronizer.current() == default_document()


def test_fresh_synchronizer_sees_committed_title(remote) -> None:
    editor = ContentSynchronizer(LocalContentStore(MemoryStorage()), remote)
    doc = default_document()
    doc.about_data.title = "New Title"
    editor.commit(doc)

    other_browser = ContentSynchronizer(LocalContentStore(MemoryStorage()), remote)

    assert other_browser.current().about_data.title == "New Title"


def test_save_message_appends_one_row(synchronizer: ContentSynchronizer, remote) -> None:
    message = MessageCreate(name="Ana", email="ana@example.com", subject="Hi", message="Hello there")

    saved = synchronizer.save_message(message)

    rows = remote.tables["messages"]
    assert len(rows) == 1
    assert {k: rows[0][k] for k in ("name", "email", "subject", "message")} == message.model_dump()
    assert saved.created_at is not None


def test_list_messages_newest_first_and_empty_on_failure(synchronizer: ContentSynchronizer, remote) -> None:
    for subject in ("first", "second"):
        synchronizer.save_message(MessageCreate(name="n", email="e@x.io", subject=subject, message="m"))

    assert [m.subject for m in synchronizer.list_messages()] == ["second", "first"]

    remote.fail = True
    assert synchronizer.list_messages() == []


def test_commit_with_fields_writes_only_those_keys_locally(synchronizer: ContentSynchronizer, remote, local_storage) -> None:
    doc = default_document()

    result = synchronizer.commit(doc, fields=("reviews",))

    assert result.outcome is SyncOutcome.SYNCED
    assert local_storage.get_item("portfolio_reviews")
    assert local_storage.get_item("portfolio_about") is None
    assert remote.tables["portfolio"][0]["content"] == doc.to_wire()
