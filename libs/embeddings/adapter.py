"""Ordered-fallback embedding adapter.

``EmbeddingAdapter.embed`` is the only way the search core obtains vectors.
It walks the configured providers in priority order and returns the first
non-empty vector. Every failure mode (missing key, open breaker, HTTP error,
bad payload, timeout) degrades to trying the next provider, and finally to
an empty list; nothing is raised to the caller.
"""

import asyncio
import time
from typing import Dict, List, Optional, Sequence

import httpx
import structlog

from libs.common.metrics import MetricsCollector
from .base import EmbeddingProvider
from .circuit_breaker import CircuitBreaker

logger = structlog.get_logger("embeddings.adapter")


class EmbeddingAdapter:
    """Turns text into a vector using an ordered chain of providers.

    Parameters
    - providers: Providers in priority order
    - timeout_seconds: Upper bound for a single provider call
    - failure_threshold / recovery_timeout: Per-provider breaker settings
    - metrics: Optional collector receiving one sample per provider attempt
    - http_client: Client to close in ``aclose`` when the adapter owns it
    """

    def __init__(
        self,
        providers: Sequence[EmbeddingProvider],
        timeout_seconds: float = 10.0,
        failure_threshold: int = 5,
        recovery_timeout: float = 30.0,
        metrics: Optional[MetricsCollector] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.providers = list(providers)
        self.timeout_seconds = timeout_seconds
        self.metrics = metrics
        self._http_client = http_client
        self.breakers: Dict[str, CircuitBreaker] = {
            provider.name: CircuitBreaker(
                name=provider.name,
                failure_threshold=failure_threshold,
                recovery_timeout=recovery_timeout,
            )
            for provider in self.providers
        }

    async def embed(self, text: str) -> List[float]:
        """Embed ``text`` with the first provider that succeeds.

        Returns an empty list for blank input or when every provider fails.
        """
        if not text or not text.strip():
            return []

        for provider in self.providers:
            if not provider.is_configured:
                logger.debug("Embedding provider not configured, skipping", provider=provider.name)
                continue

            breaker = self.breakers[provider.name]
            if not breaker.allow_request():
                logger.info("Embedding provider circuit open, skipping", provider=provider.name)
                self._record(provider.name, "skipped", 0.0)
                continue

            start_time = time.perf_counter()
            try:
                vector = await asyncio.wait_for(provider.embed(text), self.timeout_seconds)
            except asyncio.TimeoutError:
                breaker.record_failure()
                self._record(provider.name, "timeout", time.perf_counter() - start_time)
                logger.warning(
                    "Embedding provider timed out",
                    provider=provider.name,
                    timeout_seconds=self.timeout_seconds
                )
                continue
            except Exception as e:
                breaker.record_failure()
                self._record(provider.name, "failure", time.perf_counter() - start_time)
                logger.warning("Embedding provider failed", provider=provider.name, error=str(e))
                continue

            breaker.record_success()
            duration = time.perf_counter() - start_time
            if not vector:
                self._record(provider.name, "empty", duration)
                logger.warning("Embedding provider returned an empty vector", provider=provider.name)
                continue

            self._record(provider.name, "success", duration)
            logger.debug(
                "Embedding generated",
                provider=provider.name,
                dimension=len(vector),
                duration_ms=duration * 1000
            )
            return list(vector)

        logger.info("No embedding provider succeeded", providers=[p.name for p in self.providers])
        return []

    def _record(self, provider: str, outcome: str, duration: float) -> None:
        if self.metrics is not None:
            self.metrics.record_embedding(provider, outcome, duration)

    def get_stats(self) -> Dict[str, dict]:
        """Breaker statistics keyed by provider name."""
        return {name: breaker.get_stats() for name, breaker in self.breakers.items()}

    async def aclose(self) -> None:
        """Release the owned HTTP client, if any."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
