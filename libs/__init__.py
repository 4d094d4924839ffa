"""Shared libraries for the intent search service.

Subpackages:
- ``libs.common``: configuration, logging, and metrics.
- ``libs.embeddings``: embedding providers and the ordered-fallback adapter.

Notes:
- Avoid service-specific logic; keep modules cohesive and broadly useful.
"""
