"""Intent search service package.

Layout:
- ``models``: core value types (items, queries, scored results, pages).
- ``ranking``: lexical and vector scorers.
- ``hybrid``: scope filter, hybrid ranker, paginator and ``SearchManager``.
- ``retrievers``: corpus collaborators and embedding backfill.
- ``api``: HTTP endpoints over ``SearchManager.search``.
"""
