"""Utility scripts for operating the intent search service.

Scripts include:
- ``generate_embeddings.py``: backfill embeddings in a JSON corpus file.
"""
