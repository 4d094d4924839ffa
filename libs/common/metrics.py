"""Metrics collection for the search services.

Provides a thin convenience wrapper around ``prometheus_client`` so the
search API and the embedding adapter record HTTP, embedding and search
metrics with consistent label sets.

Design notes
- Metrics and labels are predeclared to avoid cardinality explosions
- A single registry is kept per service (can be injected for tests)
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
import structlog

logger = structlog.get_logger("metrics")


class MetricsCollector:
    """Centralized metrics collection.

    Parameters
    - service_name: Logical name used for scoping
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=self.registry
        )

        self.embedding_requests = Counter(
            'embedding_provider_requests_total',
            'Embedding provider attempts partitioned by outcome',
            ['provider', 'outcome'],
            registry=self.registry
        )

        self.embedding_duration = Histogram(
            'embedding_provider_duration_seconds',
            'Embedding provider call duration',
            ['provider'],
            registry=self.registry
        )

        self.search_requests = Counter(
            'search_requests_total',
            'Total search requests partitioned by ranking mode',
            ['mode'],
            registry=self.registry
        )

        self.search_duration = Histogram(
            'search_duration_seconds',
            'Search duration',
            ['mode'],
            registry=self.registry
        )

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration: float
    ) -> None:
        """Record HTTP request metrics.

        duration is expected in seconds to match Prometheus histogram units.
        """
        self.request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_embedding(self, provider: str, outcome: str, duration: float) -> None:
        """Record one embedding provider attempt.

        ``outcome`` is one of ``success``, ``empty``, ``failure``, ``timeout``
        or ``skipped``.
        """
        self.embedding_requests.labels(provider=provider, outcome=outcome).inc()
        if outcome != "skipped":
            self.embedding_duration.labels(provider=provider).observe(duration)

    def record_search(self, mode: str, duration: float) -> None:
        """Record search metrics for a ranking mode (browse/semantic/lexical)."""
        self.search_requests.labels(mode=mode).inc()
        self.search_duration.labels(mode=mode).observe(duration)

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping."""
        return generate_latest(self.registry).decode('utf-8')


# Global metrics collector instance
_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector(service_name: str) -> MetricsCollector:
    """Get or create metrics collector for a service.

    Returns a process‑wide singleton to avoid duplicate collectors/labels.
    """
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector(service_name)
        logger.info("Metrics collector created", service=service_name)
    return _metrics_collector
