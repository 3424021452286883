"""
Local key-value storage for the portfolio content.

The content document is kept as six independent JSON strings, one per
top-level field, so a partial write (e.g. only `portfolio_reviews`) is
possible. Per-visitor flags live in the same kind of storage, backed by the
signed session cookie instead of the server file.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, MutableMapping, Optional

from pydantic import ValidationError

from defaults import default_document
from schemas import ContentDocument

logger = logging.getLogger(__name__)

# wire field -> storage key
CONTENT_KEYS = {
    "projects": "portfolio_projects",
    "graphics": "portfolio_graphics",
    "reviews": "portfolio_reviews",
    "serviceDetails": "portfolio_services",
    "contactInfo": "portfolio_contact",
    "aboutData": "portfolio_about",
}
ADMIN_FLAG_KEY = "portfolio_isAdmin"
REVIEW_FLAG_KEY = "portfolio_hasSubmittedReview"
REVIEW_PROMPTED_KEY = "portfolio_reviewPrompted"


class KeyValueStorage(ABC):
    """String-to-string storage with the browser localStorage surface."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key):
        return self._data.get(key)

    def set_item(self, key, value):
        self._data[key] = str(value)

    def remove_item(self, key):
        self._data.pop(key, None)


class FileStorage(KeyValueStorage):
    """All keys in one JSON object on disk, rewritten atomically on every change."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable local store %s, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Local store %s is not a JSON object, starting empty", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=".portfolio-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get_item(self, key):
        with self._lock:
            return self._data.get(key)

    def set_item(self, key, value):
        with self._lock:
            self._data[key] = str(value)
            self._flush()

    def remove_item(self, key):
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush()


class SessionStorage(KeyValueStorage):
    """Adapter over a request session mapping (Starlette's `request.session`)."""

    def __init__(self, session: MutableMapping[str, str]):
        self.session = session

    def get_item(self, key):
        value = self.session.get(key)
        return None if value is None else str(value)

    def set_item(self, key, value):
        self.session[key] = str(value)

    def remove_item(self, key):
        self.session.pop(key, None)


class LocalContentStore:
    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def read_document(self, defaults: Optional[ContentDocument] = None) -> ContentDocument:
        """Stored fields over the defaults; a missing or malformed key keeps the default."""
        base = (defaults or default_document()).to_wire()
        for field, key in CONTENT_KEYS.items():
            raw = self.storage.get_item(key)
            if not raw:
                continue
            try:
                base[field] = json.loads(raw)
            except ValueError as exc:
                logger.warning("Ignoring malformed local key %s: %s", key, exc)
        try:
            return ContentDocument.model_validate(base)
        except ValidationError as exc:
            logger.warning("Local content failed validation, using defaults: %s", exc)
            return defaults or default_document()

    def write_document(self, doc: ContentDocument) -> None:
        wire = doc.to_wire()
        for field, key in CONTENT_KEYS.items():
            self.storage.set_item(key, json.dumps(wire[field], ensure_ascii=False))

    def write_field(self, doc: ContentDocument, field: str) -> None:
        if field not in CONTENT_KEYS:
            raise KeyError(field)
        self.storage.set_item(CONTENT_KEYS[field], json.dumps(doc.to_wire()[field], ensure_ascii=False))


def _flag(storage: KeyValueStorage, key: str) -> bool:
    return storage.get_item(key) == "true"


@dataclass
class SessionFlags:
    is_admin: bool = False
    has_submitted_review: bool = False
    review_prompted: bool = False

    @classmethod
    def load(cls, storage: KeyValueStorage) -> "SessionFlags":
        return cls(
            is_admin=_flag(storage, ADMIN_FLAG_KEY),
            has_submitted_review=_flag(storage, REVIEW_FLAG_KEY),
            review_prompted=_flag(storage, REVIEW_PROMPTED_KEY),
        )

    def save(self, storage: KeyValueStorage) -> None:
        for key, value in (
            (ADMIN_FLAG_KEY, self.is_admin),
            (REVIEW_FLAG_KEY, self.has_submitted_review),
            (REVIEW_PROMPTED_KEY, self.review_prompted),
        ):
            if value:
                storage.set_item(key, "true")
            else:
                storage.remove_item(key)
