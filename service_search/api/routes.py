"""API routes for the search service."""

import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
import structlog

from ..hybrid.pagination import InvalidQueryError
from ..hybrid.scope import ScopeOptions
from ..hybrid.search_manager import SearchManager
from ..models import PageResult, ScoredResult, SearchQuery

logger = structlog.get_logger("search_service.api")

router = APIRouter()


class SearchRequest(BaseModel):
    """Request model for the search endpoint."""
    query: str = Field("", description="Free-text query; empty lists everything")
    page: int = Field(1, description="1-based page number")
    page_size: Optional[int] = Field(None, description="Results per page; service default when omitted")
    exclude_owner_id: Optional[str] = Field(None, description="Hide this owner's intents")
    tags: Optional[List[str]] = Field(None, description="Only intents carrying any of these tags")
    contains: Optional[str] = Field(None, description="Case-insensitive substring pre-filter")


class SearchResult(BaseModel):
    """One intent in a search response."""
    id: str = Field(..., description="Intent ID")
    text: str = Field(..., description="Intent text")
    owner_id: str = Field(..., description="Owner user ID")
    tags: List[str] = Field(default_factory=list, description="Intent tags")
    location: Optional[str] = Field(None, description="Intent location")
    similarity: Optional[float] = Field(None, description="Relevance score; absent when browsing")


class SearchResponse(BaseModel):
    """Response model for the search endpoints."""
    results: List[SearchResult] = Field(..., description="Results on this page")
    total_count: int = Field(..., description="Total number of ranked results")
    has_more: bool = Field(..., description="Whether a later page exists")
    page: int = Field(..., description="Page returned")
    page_size: int = Field(..., description="Page size used")
    latency_ms: float = Field(..., description="Search latency in milliseconds")


def get_search_manager(request: Request) -> SearchManager:
    """Get search manager from application state."""
    return request.app.state.search_manager


def _page_size(requested: Optional[int], search_manager: SearchManager) -> int:
    # 0 and negatives pass through so the manager rejects them
    return search_manager.default_page_size if requested is None else requested


def _to_result(result: ScoredResult) -> SearchResult:
    item = result.item
    return SearchResult(
        id=item.id,
        text=item.text,
        owner_id=item.owner_id,
        tags=list(item.tags),
        location=item.location,
        similarity=result.similarity,
    )


async def _run_search(
    search_manager: SearchManager,
    query: SearchQuery,
    scope: Optional[ScopeOptions],
) -> SearchResponse:
    start_time = time.time()

    try:
        page: PageResult = await search_manager.search(query, scope)
    except InvalidQueryError as e:
        logger.info("Rejected search request", query=query.raw[:50], error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Search failed", query=query.raw[:50], error=str(e))
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")

    return SearchResponse(
        results=[_to_result(result) for result in page.items],
        total_count=page.total_count,
        has_more=page.has_more,
        page=query.page,
        page_size=query.page_size,
        latency_ms=(time.time() - start_time) * 1000,
    )


@router.post("/search", response_model=SearchResponse, response_model_exclude_none=True)
async def search(
    request: SearchRequest,
    search_manager: SearchManager = Depends(get_search_manager),
):
    """Search intents with optional scope filters."""
    query = SearchQuery(
        raw=request.query,
        page=request.page,
        page_size=_page_size(request.page_size, search_manager),
        exclude_owner_id=request.exclude_owner_id,
    )
    scope = None
    if request.tags or request.contains:
        scope = ScopeOptions(
            active_only=search_manager.active_only,
            exclude_owner_id=request.exclude_owner_id,
            tags=tuple(request.tags) if request.tags else None,
            contains=request.contains,
        )
    return await _run_search(search_manager, query, scope)


@router.get("/intents", response_model=SearchResponse, response_model_exclude_none=True)
async def list_intents(
    query: str = Query("", description="Free-text query; empty lists everything"),
    page: int = Query(1, description="1-based page number"),
    page_size: Optional[int] = Query(None, description="Results per page; service default when omitted"),
    exclude_owner_id: Optional[str] = Query(None, description="Hide this owner's intents"),
    search_manager: SearchManager = Depends(get_search_manager),
):
    """List or search intents."""
    search_query = SearchQuery(
        raw=query,
        page=page,
        page_size=_page_size(page_size, search_manager),
        exclude_owner_id=exclude_owner_id,
    )
    return await _run_search(search_manager, search_query, None)
