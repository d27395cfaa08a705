"""Structured logging and OpenTelemetry spans for provider-azure-validation.

This module provides:
- Structured logging setup via structlog
- A span helper wrapping admission validation runs
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer

TRACER_NAME = "provider_azure"

logger = structlog.get_logger(__name__)


def get_tracer() -> Tracer:
    """Get the OpenTelemetry tracer for provider-azure-validation."""
    return trace.get_tracer(TRACER_NAME)


def configure_logging(
    *,
    log_level: str = "INFO",
    json_format: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output JSON format. If False, output human-readable.
        add_timestamp: If True, add ISO timestamp to log entries.

    Raises:
        ValueError: If log_level is not a known level name.

    Example:
        >>> configure_logging(log_level="DEBUG", json_format=False)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {log_level}")

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", level=level, force=True)


@contextmanager
def validation_span(
    kind: str,
    *,
    operation: str = "create",
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span]:
    """Create a span around one validation run.

    The caller records the result with ``record_result``.

    Args:
        kind: Kind of the validated object (e.g. "Shoot", "Secret").
        operation: "create" or "update".
        attributes: Additional span attributes.

    Yields:
        OpenTelemetry Span instance.

    Example:
        >>> with validation_span("Shoot", operation="update") as s:
        ...     errors = validate(...)
        ...     record_result(s, errors)
    """
    attrs: dict[str, Any] = {"validation.kind": kind, "validation.operation": operation}
    attrs.update(attributes or {})

    with get_tracer().start_as_current_span(
        f"validate.{kind.lower()}", kind=SpanKind.INTERNAL, attributes=attrs
    ) as s:
        logger.debug("validation_started", **attrs)
        try:
            yield s
        except Exception as exc:
            s.set_status(Status(StatusCode.ERROR, str(exc)))
            s.record_exception(exc)
            logger.error("validation_failed", error=str(exc), **attrs)
            raise


def record_result(s: Span, errors: list[Any]) -> None:
    """Attach the error count of a validation run to its span and log it."""
    s.set_attribute("validation.error_count", len(errors))
    s.set_status(Status(StatusCode.OK))
    logger.debug("validation_completed", error_count=len(errors))
