"""
Observability Infrastructure

Structured logging, correlation tracking and Prometheus metrics for the
staffing gap engine.
"""

import contextvars
import logging
import sys
import uuid
from typing import Any

import structlog
from prometheus_client import Counter, Histogram

from .config import settings

# Context variables for correlation tracking
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
org_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("org_id", default="")

# Prometheus metrics
GAP_COMPUTATIONS = Counter(
    "shiftgap_computations_total",
    "Total line gap computations",
    ["outcome"],
)

GAP_COMPUTATION_DURATION = Histogram(
    "shiftgap_computation_duration_seconds",
    "Line gap computation duration",
)

COMPETENCE_FETCH_FAILURES = Counter(
    "shiftgap_competence_fetch_failures_total",
    "Per-employee competence level lookups that degraded to an empty level map",
)

MACHINE_STATUS = Counter(
    "shiftgap_machine_competence_status_total",
    "Machine rows produced by competence status",
    ["status"],
)


class CorrelationIdProcessor:
    """Structlog processor to add correlation and org IDs to all log entries."""

    def __call__(
        self, logger: Any, name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        correlation_id = correlation_id_var.get("")
        org_id = org_id_var.get("")

        if correlation_id:
            event_dict["correlation_id"] = correlation_id
        if org_id:
            event_dict["org_id"] = org_id

        return event_dict


def setup_structured_logging() -> None:
    """Configure structured logging with JSON output and correlation tracking."""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        CorrelationIdProcessor(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    if settings.LOG_SQL:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
    else:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set correlation ID for request tracking."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    correlation_id_var.set(correlation_id)
    return correlation_id


def set_org_id(org_id: str) -> None:
    """Bind the tenant for the current context."""
    org_id_var.set(org_id)


def record_gap_computation(
    outcome: str, duration_seconds: float, statuses: list[str] | None = None
) -> None:
    """Record Prometheus metrics for one gap computation."""
    if not settings.ENABLE_METRICS:
        return

    GAP_COMPUTATIONS.labels(outcome=outcome).inc()
    GAP_COMPUTATION_DURATION.observe(duration_seconds)
    for status in statuses or []:
        MACHINE_STATUS.labels(status=status).inc()


def record_competence_fetch_failure() -> None:
    if settings.ENABLE_METRICS:
        COMPETENCE_FETCH_FAILURES.inc()
