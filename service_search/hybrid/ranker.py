"""Hybrid semantic/lexical ranker.

The ranker prefers semantic similarity: the query is embedded once and
compared to every stored item embedding. When no vector is available, or no
item clears the semantic threshold, it falls back to a weighted blend of
exact word overlap and bigram string similarity. The two signals are never
mixed within a single ranking.

Sorting is always stable, so items with equal scores keep their corpus
order and repeated searches return identical rankings.
"""

from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

import structlog

from ..models import ScoredResult, SearchableItem, SearchQuery
from ..ranking.lexical import item_words, lexical_similarity, normalize_query, word_overlap
from ..ranking.vector import cosine_similarity

logger = structlog.get_logger("search_service.ranker")

EmbedFunction = Callable[[str], Awaitable[List[float]]]

MODE_BROWSE = "browse"
MODE_SEMANTIC = "semantic"
MODE_LEXICAL = "lexical"


def _sort_and_truncate(results: List[ScoredResult], limit: int) -> List[ScoredResult]:
    # list.sort with reverse=True keeps equal elements in input order
    results.sort(key=lambda result: result.similarity, reverse=True)
    return results[:limit]


class HybridRanker:
    """Ranks a corpus against a query.

    Parameters
    - embed: async ``text -> vector`` function; an empty vector means
      "no semantic signal"
    - semantic_threshold: minimum cosine score kept on the semantic path
    - word_overlap_weight / lexical_weight: fallback blend weights; their
      sum must not exceed 1 so scores stay in [0, 1]
    - max_candidates: default cap on returned results
    """

    def __init__(
        self,
        embed: EmbedFunction,
        semantic_threshold: float = 0.3,
        word_overlap_weight: float = 0.7,
        lexical_weight: float = 0.3,
        max_candidates: int = 10,
    ):
        weight_sum = word_overlap_weight + lexical_weight
        # tolerance for float rounding
        if weight_sum < 0.0 or weight_sum > 1.0 + 1e-9:
            raise ValueError(
                "word_overlap_weight + lexical_weight must be in [0.0, 1.0], "
                f"got {weight_sum}"
            )
        self.embed = embed
        self.semantic_threshold = semantic_threshold
        self.word_overlap_weight = word_overlap_weight
        self.lexical_weight = lexical_weight
        self.max_candidates = max_candidates

    async def rank(
        self,
        query: SearchQuery,
        corpus: Sequence[SearchableItem],
        threshold: Optional[float] = None,
        max_candidates: Optional[int] = None,
    ) -> List[ScoredResult]:
        """Rank ``corpus`` for ``query``; see ``rank_detailed``."""
        results, _ = await self.rank_detailed(query, corpus, threshold, max_candidates)
        return results

    async def rank_detailed(
        self,
        query: SearchQuery,
        corpus: Sequence[SearchableItem],
        threshold: Optional[float] = None,
        max_candidates: Optional[int] = None,
    ) -> Tuple[List[ScoredResult], str]:
        """Rank ``corpus`` and report which path produced the ranking.

        Returns ``(results, mode)`` with mode ``browse`` (blank query, corpus
        order, no similarity), ``semantic`` or ``lexical``.
        """
        normalized = normalize_query(query.raw or "")
        if not normalized:
            return [ScoredResult(item=item) for item in corpus], MODE_BROWSE

        threshold = self.semantic_threshold if threshold is None else threshold
        limit = self.max_candidates if max_candidates is None else max_candidates

        query_embedding = await self._embed_query(normalized)
        if query_embedding:
            semantic = self._rank_semantic(query_embedding, corpus, threshold, limit)
            if semantic:
                logger.info(
                    "Semantic ranking completed",
                    query=normalized[:50],
                    results_count=len(semantic)
                )
                return semantic, MODE_SEMANTIC
            logger.info(
                "No semantic match above threshold, using lexical ranking",
                query=normalized[:50],
                threshold=threshold
            )

        lexical = self._rank_lexical(normalized, corpus, limit)
        logger.info("Lexical ranking completed", query=normalized[:50], results_count=len(lexical))
        return lexical, MODE_LEXICAL

    async def _embed_query(self, text: str) -> List[float]:
        """Embed the query, treating any failure as "no embedding"."""
        try:
            return list(await self.embed(text) or [])
        except Exception as e:
            logger.warning("Query embedding failed, falling back to lexical ranking", error=str(e))
            return []

    def _rank_semantic(
        self,
        query_embedding: List[float],
        corpus: Sequence[SearchableItem],
        threshold: float,
        limit: int,
    ) -> List[ScoredResult]:
        scored = []
        for item in corpus:
            score = cosine_similarity(query_embedding, item.embedding) if item.embedding else 0.0
            if score >= threshold:
                scored.append(ScoredResult(item=item, similarity=score))
        return _sort_and_truncate(scored, limit)

    def _rank_lexical(
        self,
        query: str,
        corpus: Sequence[SearchableItem],
        limit: int,
    ) -> List[ScoredResult]:
        scored = []
        for item in corpus:
            score = (
                self.word_overlap_weight * word_overlap(query, item_words(item))
                + self.lexical_weight * lexical_similarity(query, item.text)
            )
            scored.append(ScoredResult(item=item, similarity=score))
        return _sort_and_truncate(scored, limit)
