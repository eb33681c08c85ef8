"""Structured logging for the reference data lifecycle.

structlog renders one JSON object per event. Every event carries the service
name and environment; events emitted while a dataset load is in flight also
carry the data source, so a degraded startup can be traced to its cause::

    {"event": "Reference data load failed, serving placeholder index",
     "service": "industry-mapper", "environment": "production",
     "data_source": "http", "component": "industry_mapper", ...}
"""
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "industry-mapper"


def add_service_context(service: str, environment: str | None = None) -> Processor:
    """Build a processor stamping ``service`` (and ``environment``) on every event.

    Values already present on the event are left untouched.
    """

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        if environment:
            event_dict.setdefault("environment", environment)
        return event_dict

    return processor


def configure_structured_logging(
    log_level: str = "INFO",
    service: str = SERVICE_NAME,
    environment: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service: Service name added to every event
        environment: Deployment environment added to every event, if given
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service_context(service, environment),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@contextmanager
def reference_data_context(data_source: str, **extra: Any) -> Iterator[None]:
    """Attach the data source (and ``extra``) to events logged inside the block."""
    with structlog.contextvars.bound_contextvars(data_source=data_source, **extra):
        yield


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (typically __name__ of the module)
        **initial_values: Context carried by every event of this logger,
            e.g. ``component="industry_mapper"``

    Returns:
        Lazily configured logger, so it honours configuration applied after import
    """
    return structlog.get_logger(name, **initial_values)
