"""
Observability module with structured logging and Prometheus metrics.
Provides structlog configuration and workflow metrics collection.
"""
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from compliance_orchestrator.core.config import Settings, get_settings


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Initialise structlog for JSON (or console) output."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper())

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout)

    renderer: Any
    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)


# Prometheus metrics registry
registry = CollectorRegistry()

workflow_runs_total = Counter(
    "compliance_workflow_runs_total",
    "Total number of compliance workflow runs",
    ["status"],
    registry=registry
)

workflow_latency_ms = Histogram(
    "compliance_workflow_latency_ms",
    "Compliance workflow latency in milliseconds",
    buckets=[10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000],
    registry=registry
)

checker_failures_total = Counter(
    "compliance_checker_failures_total",
    "Total number of specialist checker failures",
    ["kind"],
    registry=registry
)

route_decisions_total = Counter(
    "compliance_route_decisions_total",
    "Total number of routing decisions after risk aggregation",
    ["route"],
    registry=registry
)

active_workflows_gauge = Gauge(
    "compliance_active_workflows",
    "Number of currently running compliance workflows",
    registry=registry
)


def get_metrics() -> bytes:
    """
    Generate Prometheus metrics in exposition format.

    Returns:
        bytes: Metrics in Prometheus exposition format
    """
    return generate_latest(registry)


def get_metrics_content_type() -> str:
    """Get the content type for Prometheus metrics."""
    return CONTENT_TYPE_LATEST


def _metrics_enabled(enabled: Optional[bool]) -> bool:
    """Explicit flag from the caller's Settings, else the process-wide default."""
    if enabled is None:
        return get_settings().enable_metrics
    return enabled


def record_workflow_complete(status: str, duration_ms: float, enabled: Optional[bool] = None) -> None:
    """Update run metrics for a finished workflow."""
    if not _metrics_enabled(enabled):
        return
    workflow_runs_total.labels(status=status).inc()
    workflow_latency_ms.observe(duration_ms)


def record_checker_failure(kind: str, enabled: Optional[bool] = None) -> None:
    if not _metrics_enabled(enabled):
        return
    checker_failures_total.labels(kind=kind).inc()


def record_route(route: str, enabled: Optional[bool] = None) -> None:
    if not _metrics_enabled(enabled):
        return
    route_decisions_total.labels(route=route).inc()


@contextmanager
def track_active_workflow(enabled: Optional[bool] = None) -> Iterator[None]:
    """Count a workflow as active for the duration of the block."""
    enabled = _metrics_enabled(enabled)
    if enabled:
        active_workflows_gauge.inc()
    try:
        yield
    finally:
        if enabled:
            active_workflows_gauge.dec()
