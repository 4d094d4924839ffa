"""Hybrid search orchestration.

- ``scope``: corpus filtering before scoring
- ``ranker``: semantic-first ranking with lexical fallback
- ``pagination``: page slicing and parameter validation
- ``search_manager``: the composed ``search`` entry point
"""

from .pagination import InvalidQueryError, paginate
from .ranker import HybridRanker
from .scope import ScopeOptions, filter_scope
from .search_manager import SearchManager

__all__ = [
    "HybridRanker",
    "InvalidQueryError",
    "ScopeOptions",
    "SearchManager",
    "filter_scope",
    "paginate",
]
