"""Core value types for intent search.

These are plain dataclasses: the search core receives immutable snapshots
from the corpus collaborator and hands back per-call results. Nothing here
is persisted or shared between searches.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

import structlog

logger = structlog.get_logger("search_service.models")

T = TypeVar("T")


def _parse_embedding(item_id: str, raw: Any) -> Tuple[float, ...]:
    """Decode a stored embedding (list or JSON text) into a float tuple.

    Unparseable values are treated as "no embedding" so a bad row only costs
    that item its semantic score.
    """
    if raw is None or raw == "":
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Could not parse stored embedding", item_id=item_id)
            return ()
    try:
        return tuple(float(v) for v in raw)
    except (TypeError, ValueError):
        logger.warning("Stored embedding is not a numeric sequence", item_id=item_id)
        return ()


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _parse_bool(name: str, raw: Any) -> bool:
    """Read a flag stored as a bool, number or string such as ``"false"``."""
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value in _TRUE_STRINGS:
            return True
        if value in _FALSE_STRINGS:
            return False
        raise ValueError(f"{name} is not a boolean: {raw!r}")
    return bool(raw)


@dataclass(frozen=True)
class SearchableItem:
    """One intent as seen by the search core."""
    id: str
    text: str
    owner_id: str
    tags: Tuple[str, ...] = ()
    location: Optional[str] = None
    embedding: Tuple[float, ...] = ()
    is_active: bool = True

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "SearchableItem":
        """Build an item from a persistence record.

        Accepts ``owner_id``/``ownerId``/``user`` for the owner and
        ``is_active``/``isActive`` for the active flag; ``embedding`` may be
        a list or a JSON-encoded string.

        Raises
        - KeyError: when ``id`` or ``text`` is missing
        - ValueError: for blank text or an unreadable active flag
        """
        item_id = str(record["id"])
        raw_text = record["text"]
        text = "" if raw_text is None else str(raw_text)
        if not text.strip():
            raise ValueError(f"item {item_id} has blank text")
        owner = record.get("owner_id", record.get("ownerId", record.get("user", "")))
        is_active = record.get("is_active", record.get("isActive", True))
        return cls(
            id=item_id,
            text=text,
            owner_id=str(owner),
            tags=tuple(str(t) for t in record.get("tags") or ()),
            location=record.get("location") or None,
            embedding=_parse_embedding(item_id, record.get("embedding")),
            is_active=_parse_bool("is_active", is_active),
        )

    def to_record(self) -> Dict[str, Any]:
        """Inverse of ``from_record`` (embedding written as a list)."""
        return {
            "id": self.id,
            "text": self.text,
            "owner_id": self.owner_id,
            "tags": list(self.tags),
            "location": self.location,
            "embedding": list(self.embedding),
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class ScoredResult:
    """An item with its similarity; ``similarity`` is None when browsing."""
    item: SearchableItem
    similarity: Optional[float] = None


@dataclass(frozen=True)
class SearchQuery:
    """Parameters of one search call."""
    raw: str = ""
    page: int = 1
    page_size: int = 10
    exclude_owner_id: Optional[str] = None


@dataclass
class PageResult(Generic[T]):
    """One page of a sorted result list plus totals."""
    items: List[T] = field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
