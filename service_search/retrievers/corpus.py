"""Corpus collaborators for the search service.

The search core never owns storage: per call it asks a ``CorpusProvider``
for a snapshot of searchable items in their natural order (insertion order for
the stores shipped here: the seed list, or the order of the JSON file).
Providers are swappable without touching the ranker.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import structlog

from libs.common.config import SearchConfig
from ..models import SearchableItem

logger = structlog.get_logger("search_service.corpus")

SEED_INTENTS = [
    ("1", "Looking for a new game to play", "Alice"),
    ("2", "Need an easy meal to cook", "Bob"),
    ("3", "Searching for a good book to read", "Charlie"),
    ("4", "Want to learn a new programming language", "David"),
    ("5", "Seeking recommendations for a weekend getaway", "Eve"),
    ("6", "Looking for a new hobby to try", "Frank"),
    ("7", "Need tips for improving productivity", "Grace"),
    ("8", "Searching for a good workout routine", "Henry"),
    ("9", "Want to start a vegetable garden", "Ivy"),
    ("10", "Looking for volunteer opportunities in my area", "Jack"),
    ("11", "Need advice on adopting a pet", "Kate"),
    ("12", "Searching for a new podcast to listen to", "Liam"),
    ("13", "Want to learn how to meditate", "Mia"),
    ("14", "Looking for tips on reducing plastic waste", "Noah"),
    ("15", "Need ideas for a creative project", "Olivia"),
]


def seed_items() -> List[SearchableItem]:
    """The demo intents, one per user, in insertion order."""
    return [
        SearchableItem(id=item_id, text=text, owner_id=owner)
        for item_id, text, owner in SEED_INTENTS
    ]


class CorpusProvider(ABC):
    """Source of searchable items."""

    @abstractmethod
    async def fetch(self) -> List[SearchableItem]:
        """Return a snapshot of the corpus in natural order."""
        pass


class InMemoryCorpusProvider(CorpusProvider):
    """Serves a fixed list of items; ``replace`` swaps in a new snapshot."""

    def __init__(self, items: Iterable[SearchableItem] = ()):
        self._items: List[SearchableItem] = list(items)

    async def fetch(self) -> List[SearchableItem]:
        return list(self._items)

    def replace(self, items: Iterable[SearchableItem]) -> None:
        self._items = list(items)


def load_corpus_file(path: Union[str, Path]) -> List[SearchableItem]:
    """Read a JSON array of item records.

    Raises
    - ValueError: when the file is not a JSON array of records
    """
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"Corpus file {path} must contain a JSON array")

    items = []
    for index, record in enumerate(records):
        try:
            items.append(SearchableItem.from_record(record))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid corpus record at index {index}: {e}") from e
    return items


def save_corpus_file(path: Union[str, Path], items: Sequence[SearchableItem]) -> None:
    """Write items back as a JSON array of records."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump([item.to_record() for item in items], f, indent=2)


class JsonFileCorpusProvider(CorpusProvider):
    """Reads the corpus from a JSON file on every fetch.

    The file order is the natural order. Reading happens in a worker thread
    so large files do not stall the event loop.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def fetch(self) -> List[SearchableItem]:
        items = await asyncio.to_thread(load_corpus_file, self.path)
        logger.debug("Corpus loaded", path=str(self.path), count=len(items))
        return items


def create_corpus_provider(config: SearchConfig, path: Optional[str] = None) -> CorpusProvider:
    """Pick the corpus provider for ``config``.

    A configured JSON corpus path wins; otherwise the seed intents are served
    from memory.
    """
    corpus_path = path or config.ml_search_corpus_path
    if corpus_path:
        logger.info("Using JSON corpus", path=corpus_path)
        return JsonFileCorpusProvider(corpus_path)

    logger.info("Using in-memory seed corpus", count=len(SEED_INTENTS))
    return InMemoryCorpusProvider(seed_items())
