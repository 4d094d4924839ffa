"""Circuit breaker guarding calls to a single embedding provider."""

import time
from enum import Enum
from typing import Callable, Optional

import structlog

logger = structlog.get_logger("embeddings.circuit_breaker")


class CircuitBreakerState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"      # Normal operation
    OPEN = "open"          # Failing, skip the provider
    HALF_OPEN = "half_open"  # One probe allowed


class CircuitBreaker:
    """Consecutive-failure circuit breaker.

    The breaker never retries anything itself: callers ask ``allow_request``
    before a call and report the outcome with ``record_success`` or
    ``record_failure``. State changes are plain attribute updates with no
    awaits in between, so one instance can be shared across concurrent
    requests on the same event loop.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Configure a circuit breaker.

        Parameters
        - name: Identifier for logs (the provider name)
        - failure_threshold: Consecutive failures before opening
        - recovery_timeout: Seconds to wait before a HALF_OPEN probe
        - clock: Monotonic time source, injectable for tests
        """
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock

        self.failure_count = 0
        self.opened_at: Optional[float] = None
        self.state = CircuitBreakerState.CLOSED

    def allow_request(self) -> bool:
        """Return True when a call may be attempted now."""
        if self.state == CircuitBreakerState.CLOSED:
            return True

        now = self._clock()
        if self.opened_at is not None and now - self.opened_at < self.recovery_timeout:
            # OPEN and still cooling down, or HALF_OPEN with a probe in flight
            return False

        # A HALF_OPEN probe older than the recovery timeout was abandoned
        # (e.g. the request was cancelled), so another probe is allowed.
        if self.state == CircuitBreakerState.OPEN:
            logger.info("Circuit breaker transitioning to HALF_OPEN", name=self.name)
        self.state = CircuitBreakerState.HALF_OPEN
        self.opened_at = now
        return True

    def record_success(self) -> None:
        """Close the breaker and reset the failure count."""
        if self.state != CircuitBreakerState.CLOSED:
            logger.info("Circuit breaker reset to CLOSED", name=self.name)
        self.state = CircuitBreakerState.CLOSED
        self.failure_count = 0
        self.opened_at = None

    def record_failure(self) -> None:
        """Count a failure, opening the breaker at the threshold."""
        self.failure_count += 1

        if (
            self.state == CircuitBreakerState.HALF_OPEN
            or self.failure_count >= self.failure_threshold
        ):
            if self.state != CircuitBreakerState.OPEN:
                logger.warning(
                    "Circuit breaker opened due to failures",
                    name=self.name,
                    failure_count=self.failure_count,
                    threshold=self.failure_threshold
                )
            self.state = CircuitBreakerState.OPEN
            self.opened_at = self._clock()

    def get_stats(self) -> dict:
        """Get circuit breaker statistics."""
        return {
            "name": self.name,
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "recovery_timeout": self.recovery_timeout,
        }
