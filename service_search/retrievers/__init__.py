"""Corpus access for the search service.

- ``corpus``: ``CorpusProvider`` implementations and the seed intents
- ``backfill``: fills in missing item embeddings
"""
