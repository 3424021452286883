"""
Content synchronizer between the local store and the remote `portfolio` row.

Local writes always happen first; the remote copy is a last-writer-wins
mirror replaced wholesale on every commit (no merge, no version check).
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import ValidationError

from database import RemoteStore, RemoteStoreError, create_document, get_documents, upsert_document
from schemas import ContentDocument, Message, MessageCreate
from storage import LocalContentStore

logger = logging.getLogger(__name__)

CONTENT_TABLE = "portfolio"
CONTENT_ROW_ID = 1
MESSAGES_TABLE = "messages"


class SyncOutcome(str, Enum):
    SYNCED = "synced"
    LOCAL_ONLY = "local_only"


@dataclass
class CommitResult:
    outcome: SyncOutcome
    error: Optional[str] = None

    @property
    def synced(self) -> bool:
        return self.outcome is SyncOutcome.SYNCED

    @property
    def message(self) -> str:
        if self.synced:
            return "Portfolio saved and synced."
        return "Saved locally, but remote sync failed. Check your configuration."


class ContentSynchronizer:
    def __init__(self, local: LocalContentStore, remote: Optional[RemoteStore] = None):
        self.local = local
        self.remote = remote

    def load(self) -> Optional[ContentDocument]:
        """Remote copy of the document, or None when the caller should keep its local/default copy."""
        if self.remote is None:
            return None
        try:
            rows = get_documents(CONTENT_TABLE, {"id": CONTENT_ROW_ID}, limit=1, store=self.remote)
        except RemoteStoreError as e:
            logger.warning("Remote load failed, using local/initial data: %s", e)
            return None
        if not rows or not rows[0].get("content"):
            logger.info("No remote portfolio row, using local/initial data")
            return None
        try:
            return ContentDocument.model_validate(rows[0]["content"])
        except ValidationError as e:
            logger.warning("Remote portfolio content is malformed, using local/initial data: %s", e)
            return None

    def current(self) -> ContentDocument:
        return self.load() or self.local.read_document()

    def commit(self, doc: ContentDocument, fields: Optional[Iterable[str]] = None) -> CommitResult:
        """Local write of `fields` (default: all six keys), then a wholesale remote upsert."""
        if fields is None:
            self.local.write_document(doc)
        else:
            for field in fields:
                self.local.write_field(doc, field)

        if self.remote is None:
            logger.warning("Remote store not configured. Data saved locally only.")
            return CommitResult(SyncOutcome.LOCAL_ONLY, "remote store not configured")
        row = {
            "id": CONTENT_ROW_ID,
            "content": doc.to_wire(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            upsert_document(CONTENT_TABLE, row, store=self.remote)
        except RemoteStoreError as e:
            logger.error("Failed to sync portfolio to remote store: %s", e)
            return CommitResult(SyncOutcome.LOCAL_ONLY, str(e))
        return CommitResult(SyncOutcome.SYNCED)

    # Messages
    def save_message(self, message: MessageCreate) -> Message:
        """Raises RemoteStoreError; the contact form reports it and keeps its contents."""
        if self.remote is None:
            logger.warning("Remote store not configured. Message not saved.")
            raise RemoteStoreError("remote store not configured")
        try:
            row = create_document(MESSAGES_TABLE, message, store=self.remote)
        except RemoteStoreError as e:
            logger.error("Error saving message: %s", e)
            raise
        return Message.model_validate(row)

    def list_messages(self) -> List[Message]:
        if self.remote is None:
            return []
        try:
            rows = get_documents(MESSAGES_TABLE, order="created_at.desc", store=self.remote)
        except RemoteStoreError as e:
            logger.error("Error fetching messages: %s", e)
            return []
        out: List[Message] = []
        for row in rows:
            try:
                out.append(Message.model_validate(row))
            except ValidationError:
                logger.warning("Skipping malformed message row %r", row.get("id"))
        return out
