"""API subpackage for the search service.

Routers expose the search and intent listing endpoints. The transport layer
remains thin and delegates to ``SearchManager``.
"""
