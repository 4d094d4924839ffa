"""Tests for the intent search service.

Unit tests cover the scorers, the embedding adapter, ranking, pagination and
scope filtering; ``test_api`` drives the HTTP surface with FastAPI's test
client. No external services are needed.
"""
