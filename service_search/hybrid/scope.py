"""Corpus scope filtering applied before any scoring."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import structlog

from ..models import SearchableItem

logger = structlog.get_logger("search_service.scope")

CONTAINS_FIELDS = ("text", "tags", "location", "owner_id")


@dataclass(frozen=True)
class ScopeOptions:
    """Which corpus items a search may see.

    - active_only: drop inactive items
    - exclude_owner_id: drop items owned by this user (usually the searcher)
    - tags: keep items carrying any of these tags (case-insensitive)
    - contains: keep items where any of ``contains_fields`` contains this
      substring (case-insensitive)
    """
    active_only: bool = True
    exclude_owner_id: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    contains: Optional[str] = None
    contains_fields: Tuple[str, ...] = CONTAINS_FIELDS


def _field_values(item: SearchableItem, field_name: str) -> Iterable[str]:
    if field_name == "tags":
        return item.tags
    if field_name not in CONTAINS_FIELDS:
        raise ValueError(f"Unsupported contains field: {field_name}")
    value = getattr(item, field_name)
    return (value,) if value else ()


def filter_scope(corpus: Sequence[SearchableItem], opts: ScopeOptions) -> List[SearchableItem]:
    """Return the items of ``corpus`` inside ``opts``, in their original order.

    Repeated ids keep only their first in-scope occurrence.
    """
    wanted_tags = {tag.lower() for tag in opts.tags} if opts.tags else None
    needle = opts.contains.strip().lower() if opts.contains and opts.contains.strip() else None

    seen_ids = set()
    filtered = []
    for item in corpus:
        if item.id in seen_ids:
            continue
        if opts.active_only and not item.is_active:
            continue
        if opts.exclude_owner_id is not None and item.owner_id == opts.exclude_owner_id:
            continue
        if wanted_tags is not None and not any(tag.lower() in wanted_tags for tag in item.tags):
            continue
        if needle is not None and not any(
            needle in value.lower()
            for field_name in opts.contains_fields
            for value in _field_values(item, field_name)
        ):
            continue
        seen_ids.add(item.id)
        filtered.append(item)

    logger.debug("Scope filter applied", original_count=len(corpus), filtered_count=len(filtered))
    return filtered
