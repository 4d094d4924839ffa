#!/usr/bin/env python3
"""Script to generate embeddings for corpus items stored without one."""

import argparse
import asyncio
import sys
from typing import Optional

import structlog

from libs.common.config import SearchConfig
from libs.common.logging import configure_logging
from libs.embeddings.factory import create_embedding_adapter
from service_search.retrievers.backfill import backfill_embeddings
from service_search.retrievers.corpus import load_corpus_file, save_corpus_file

logger = structlog.get_logger("generate_embeddings")


async def generate_embeddings(
    corpus_path: str,
    output_path: Optional[str] = None,
    delay_seconds: float = 0.1,
    config: Optional[SearchConfig] = None
) -> bool:
    """Backfill embeddings in a JSON corpus file.

    Returns True when every pending item received an embedding.
    """
    if not config:
        config = SearchConfig()

    items = load_corpus_file(corpus_path)
    adapter = create_embedding_adapter(config)
    try:
        updated, processed, successful = await backfill_embeddings(
            items, adapter.embed, delay_seconds=delay_seconds
        )
    finally:
        await adapter.aclose()

    save_corpus_file(output_path or corpus_path, updated)
    logger.info(
        "Corpus written",
        path=output_path or corpus_path,
        processed=processed,
        successful=successful
    )
    return processed == successful


def main():
    """Main function for CLI."""
    parser = argparse.ArgumentParser(description="Generate embeddings for corpus items without one")
    parser.add_argument("--corpus", required=True, help="JSON corpus file to update")
    parser.add_argument("--output", help="Write the result here instead of in place")
    parser.add_argument("--delay", type=float, default=0.1, help="Seconds to wait between provider calls")

    args = parser.parse_args()

    config = SearchConfig()
    configure_logging("generate_embeddings", config.ml_log_level, config.ml_log_format)

    try:
        success = asyncio.run(generate_embeddings(
            corpus_path=args.corpus,
            output_path=args.output,
            delay_seconds=args.delay,
            config=config
        ))
    except (OSError, ValueError) as e:
        logger.error("Embedding generation failed", corpus=args.corpus, error=str(e))
        print(f"Failed to generate embeddings for {args.corpus}: {e}")
        sys.exit(1)

    if success:
        print(f"Embeddings generated for {args.corpus}")
        sys.exit(0)
    else:
        print(f"Some items in {args.corpus} are still missing embeddings")
        sys.exit(1)


if __name__ == "__main__":
    main()
