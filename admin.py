"""
Admin mutation surface.

An AdminDraft holds a plain JSON tree (dicts, lists, scalars) of the content
document, keyed by wire names, so paths look like `aboutData.title`,
`projects.0.title` or `serviceDetails.Digital Branding.before`. Nothing
reaches the stores until `commit`.
"""

import copy
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from schemas import ContentDocument, MediaItem, ServiceItem, ShowcaseItem, tag_service_item
from sync import CommitResult, ContentSynchronizer

Tree = Union[Dict[str, Any], List[Any]]

COLLECTIONS = ("projects", "graphics", "reviews")

_service_item = TypeAdapter(ServiceItem)


class InvalidPathError(ValueError):
    pass


class UnknownCollectionError(KeyError):
    pass


def new_item_id(existing: Iterable[Any], clock: Callable[[], float] = time.time) -> int:
    """Millisecond timestamp, bumped past every id already in use."""
    candidate = int(clock() * 1000)
    used = [i for i in existing if isinstance(i, int)]
    if used and candidate <= max(used):
        candidate = max(used) + 1
    return candidate


def _child(node: Tree, key: str, path: str) -> Any:
    if isinstance(node, dict):
        if key not in node:
            raise InvalidPathError(f"invalid path {path!r}: no key {key!r}")
        return node[key]
    if isinstance(node, list):
        return node[_index(node, key, path)]
    raise InvalidPathError(f"invalid path {path!r}: {key!r} is below a scalar")


def _index(node: List[Any], key: str, path: str) -> int:
    try:
        idx = int(key)
    except ValueError:
        raise InvalidPathError(f"invalid path {path!r}: {key!r} is not a list index") from None
    if not 0 <= idx < len(node):
        raise InvalidPathError(f"invalid path {path!r}: index {idx} out of range")
    return idx


def set_path(node: Any, keys: List[str], value: Any, path: str) -> None:
    head, rest = keys[0], keys[1:]
    if not isinstance(node, (dict, list)):
        raise InvalidPathError(f"invalid path {path!r}: {head!r} is below a scalar")
    if rest:
        set_path(_child(node, head, path), rest, value, path)
    elif isinstance(node, dict):
        node[head] = value
    else:
        node[_index(node, head, path)] = value


def default_item(collection: str, item_id: int) -> Dict[str, Any]:
    if collection == "projects":
        return {
            "id": item_id,
            "title": "New Project",
            "category": "Web Development",
            "image": "https://picsum.photos/800/600",
            "demoUrl": "#",
            "youtubeUrl": "#",
            "description": "Description here",
        }
    if collection == "graphics":
        return {"id": item_id, "title": "New Graphic", "category": "Branding", "image": "https://picsum.photos/800/800"}
    if collection == "reviews":
        return {
            "id": item_id,
            "name": "New Client",
            "role": "Role",
            "comment": "Review text",
            "rating": 5,
            "avatar": "https://i.pravatar.cc/150",
        }
    raise UnknownCollectionError(collection)


def default_service_item(service: str, kind: Optional[str]) -> Union[ShowcaseItem, MediaItem]:
    if kind is None:
        kind = "media" if service == "Video Editing" else "showcase"
    if kind == "media":
        return MediaItem(title="New Video", url="#", thumbnail="https://picsum.photos/600/400")
    return ShowcaseItem(name="New Item", image="https://picsum.photos/600/400", link="#", tech="Tech")


# role -> attribute, per variant
def _role_field(item: Union[ShowcaseItem, MediaItem], role: str) -> str:
    if isinstance(item, ShowcaseItem):
        fields = {"label": "name", "link": "link", "picture": "image", "tech": "tech"}
    else:
        fields = {
            "label": "title",
            "link": "url",
            "picture": "image" if item.image is not None else "thumbnail",
        }
    if role not in fields:
        raise InvalidPathError(f"{item.kind} items have no {role!r}")
    return fields[role]


class AdminDraft:
    def __init__(self, doc: ContentDocument, clock: Callable[[], float] = time.time):
        self.data: Dict[str, Any] = doc.to_wire()
        self.clock = clock
        self._issued: List[int] = []

    def document(self) -> ContentDocument:
        """Validate the draft; raises pydantic.ValidationError."""
        return ContentDocument.model_validate(copy.deepcopy(self.data))

    def set_field(self, path: str, value: Any) -> None:
        keys = path.split(".")
        if not path or any(k == "" for k in keys):
            raise InvalidPathError(f"invalid path {path!r}")
        set_path(self.data, keys, copy.deepcopy(value), path)

    def _collection(self, collection: str) -> List[Dict[str, Any]]:
        if collection not in COLLECTIONS:
            raise UnknownCollectionError(collection)
        return self.data.setdefault(collection, [])

    def add_item(self, collection: str) -> Dict[str, Any]:
        items = self._collection(collection)
        used = [item.get("id") for item in items] + self._issued
        item = default_item(collection, new_item_id(used, self.clock))
        self._issued.append(item["id"])
        items.append(item)
        return item

    def remove_item(self, collection: str, item_id: int) -> bool:
        items = self._collection(collection)
        kept = [item for item in items if item.get("id") != item_id]
        self.data[collection] = kept
        return len(kept) != len(items)

    # serviceDetails[name] lists
    def _service_items(self, service: str) -> List[Dict[str, Any]]:
        entry = self.data.get("serviceDetails", {}).get(service)
        if not isinstance(entry, list):
            raise UnknownCollectionError(service)
        return entry

    def add_service_item(self, service: str, kind: Optional[str] = None) -> Dict[str, Any]:
        items = self._service_items(service)
        if kind is None and items and isinstance(items[0], dict):
            kind = items[0].get("kind")
        item = default_service_item(service, kind).model_dump(by_alias=True)
        items.append(item)
        return item

    def update_service_item(self, service: str, index: int, role: str, value: str) -> Dict[str, Any]:
        items = self._service_items(service)
        if not 0 <= index < len(items):
            raise InvalidPathError(f"{service} has no item {index}")
        try:
            item = _service_item.validate_python(tag_service_item(items[index]))
        except ValidationError as e:
            raise InvalidPathError(f"{service} item {index} is not a valid service item: {e.error_count()} error(s)") from None
        item = item.model_copy(update={_role_field(item, role): value})
        items[index] = item.model_dump(by_alias=True)
        return items[index]

    def remove_service_item(self, service: str, index: int) -> bool:
        items = self._service_items(service)
        if not 0 <= index < len(items):
            return False
        del items[index]
        return True

    def commit(self, synchronizer: ContentSynchronizer) -> CommitResult:
        return synchronizer.commit(self.document())


class DraftRegistry:
    """One open draft per admin subject; opening again replaces the previous one."""

    def __init__(self):
        self._drafts: Dict[str, AdminDraft] = {}
        self._lock = threading.Lock()

    def open(self, owner: str, doc: ContentDocument) -> AdminDraft:
        draft = AdminDraft(doc)
        with self._lock:
            self._drafts[owner] = draft
        return draft

    def get(self, owner: str) -> Optional[AdminDraft]:
        with self._lock:
            return self._drafts.get(owner)

    def discard(self, owner: str) -> None:
        with self._lock:
            self._drafts.pop(owner, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._drafts)
