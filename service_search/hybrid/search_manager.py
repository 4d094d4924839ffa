"""Search manager: the single entry point of the search core.

Composes corpus fetch -> scope filter -> hybrid ranking -> pagination.
Holds no per-search state, so one manager serves concurrent requests.
"""

import dataclasses
import time
from typing import Optional

import structlog

from libs.common.config import SearchConfig
from libs.common.metrics import MetricsCollector
from ..models import PageResult, SearchQuery
from ..retrievers.corpus import CorpusProvider
from .pagination import paginate, validate_page_params
from .ranker import EmbedFunction, HybridRanker
from .scope import ScopeOptions, filter_scope

logger = structlog.get_logger("search_service.search_manager")


class SearchManager:
    """Runs intent searches.

    Responsibilities
    - Fetch a corpus snapshot from the collaborator
    - Restrict it to the caller's scope
    - Rank it (semantic first, lexical fallback)
    - Return the requested page with totals
    """

    def __init__(
        self,
        corpus_provider: CorpusProvider,
        ranker: HybridRanker,
        active_only: bool = True,
        default_page_size: int = 10,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.corpus_provider = corpus_provider
        self.ranker = ranker
        self.active_only = active_only
        self.default_page_size = default_page_size
        self.metrics = metrics

    @classmethod
    def from_config(
        cls,
        config: SearchConfig,
        corpus_provider: CorpusProvider,
        embed: EmbedFunction,
        metrics: Optional[MetricsCollector] = None,
    ) -> "SearchManager":
        """Wire a manager with ranking parameters taken from ``config``."""
        ranker = HybridRanker(
            embed=embed,
            semantic_threshold=config.ml_search_semantic_threshold,
            word_overlap_weight=config.ml_search_word_overlap_weight,
            lexical_weight=config.ml_search_lexical_weight,
            max_candidates=config.ml_search_max_candidates,
        )
        return cls(
            corpus_provider=corpus_provider,
            ranker=ranker,
            active_only=config.ml_search_active_only,
            default_page_size=config.ml_search_default_page_size,
            metrics=metrics,
        )

    def default_scope(self, query: SearchQuery) -> ScopeOptions:
        """Scope used when the caller passes none."""
        return ScopeOptions(
            active_only=self.active_only,
            exclude_owner_id=query.exclude_owner_id,
        )

    async def search(
        self,
        query: SearchQuery,
        scope: Optional[ScopeOptions] = None,
    ) -> PageResult:
        """Search the corpus and return one page of results.

        An explicit ``scope`` without an owner exclusion inherits
        ``query.exclude_owner_id``.

        Raises
        - InvalidQueryError: for a non-positive page or page size

        Embedding outages never raise here; they only switch ranking to the
        lexical path.
        """
        validate_page_params(query.page, query.page_size)
        start_time = time.perf_counter()

        if scope is None:
            scope = self.default_scope(query)
        elif scope.exclude_owner_id is None and query.exclude_owner_id is not None:
            scope = dataclasses.replace(scope, exclude_owner_id=query.exclude_owner_id)
        corpus = await self.corpus_provider.fetch()
        in_scope = filter_scope(corpus, scope)

        ranked, mode = await self.ranker.rank_detailed(query, in_scope)
        page = paginate(ranked, query.page, query.page_size)

        duration = time.perf_counter() - start_time
        if self.metrics is not None:
            self.metrics.record_search(mode, duration)

        logger.info(
            "Search completed",
            query=query.raw[:50],
            mode=mode,
            corpus_count=len(corpus),
            in_scope_count=len(in_scope),
            total_count=page.total_count,
            page=query.page,
            has_more=page.has_more,
            duration_ms=duration * 1000
        )
        return page
