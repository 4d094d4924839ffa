"""Structured logging configuration for the search services.

Standardizes logging with ``structlog``. Output is either JSON (for machines)
or a pretty console format (for humans); every line carries the bound
service name so aggregated logs stay attributable.

Typical usage
- Call ``configure_logging(service_name, log_level, log_format)`` at startup
- Acquire loggers via ``structlog.get_logger(name)``
"""

import logging
import sys
from typing import Iterable

import structlog
from structlog.stdlib import LoggerFactory, add_logger_name

# Chatty client libraries that log every outbound embedding request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "json",
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configure structured logging for a service.

    Parameters
    - service_name: Logical service identifier bound to each log line
    - log_level: ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR`` (case‑insensitive)
    - log_format: ``json`` for production; ``console`` for local dev
    - quiet_loggers: stdlib logger names raised to WARNING
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_logger_name,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)
