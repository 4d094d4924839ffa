"""Embedding backfill for items stored without a vector."""

import asyncio
import dataclasses
from typing import Awaitable, Callable, List, Sequence, Tuple

import structlog

from ..models import SearchableItem

logger = structlog.get_logger("search_service.backfill")


async def backfill_embeddings(
    items: Sequence[SearchableItem],
    embed: Callable[[str], Awaitable[List[float]]],
    delay_seconds: float = 0.1,
) -> Tuple[List[SearchableItem], int, int]:
    """Embed every item whose embedding is empty.

    Items that already have a vector are passed through untouched; items
    whose embedding fails keep an empty vector. A short pause between calls
    keeps hosted providers under their rate limits.

    Returns
    - ``(items, processed, successful)`` with items in input order
    """
    updated: List[SearchableItem] = []
    processed = 0
    successful = 0
    pending = sum(1 for item in items if not item.embedding)

    logger.info("Starting embedding backfill", total=len(items), pending=pending)

    for item in items:
        if item.embedding:
            updated.append(item)
            continue

        if processed and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
        processed += 1

        try:
            vector = await embed(item.text)
        except Exception as e:
            logger.error("Embedding backfill failed for item", item_id=item.id, error=str(e))
            vector = []

        if vector:
            successful += 1
            updated.append(dataclasses.replace(item, embedding=tuple(float(v) for v in vector)))
            logger.info("Generated embedding", item_id=item.id, progress=f"{processed}/{pending}")
        else:
            updated.append(item)
            logger.warning("No embedding generated", item_id=item.id, progress=f"{processed}/{pending}")

    logger.info("Embedding backfill completed", processed=processed, successful=successful)
    return updated, processed, successful
