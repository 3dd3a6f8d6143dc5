"""Prometheus metrics definitions and helpers.

Provides metric definitions for the request validation layer and the HTTP
surface in front of it.
"""

from functools import lru_cache
from typing import Callable

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    REGISTRY,
    CollectorRegistry,
)


class HTTPMetrics:
    """HTTP request metrics."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize HTTP metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=registry,
        )

        self.requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method", "endpoint"],
            registry=registry,
        )


class DemoMetrics:
    """Validation and classification metrics."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize demo metrics.

        Args:
            registry: Prometheus registry to use
        """
        # Identifier outcomes (missing / non_numeric / valid)
        self.identifiers_classified = Counter(
            "demo_identifiers_classified_total",
            "Identifiers classified by outcome",
            ["outcome"],
            registry=registry,
        )

        self.user_lookups = Counter(
            "demo_user_lookups_total",
            "User lookups by result",
            ["result"],
            registry=registry,
        )

        self.email_checks = Counter(
            "demo_email_checks_total",
            "Email syntax checks by result",
            ["mode", "result"],
            registry=registry,
        )

        self.levels_assigned = Counter(
            "demo_user_levels_assigned_total",
            "User levels assigned by the classifier",
            ["level"],
            registry=registry,
        )

        self.aggregation_faults = Counter(
            "demo_aggregation_faults_total",
            "Aggregations rejected because of a null element",
            registry=registry,
        )

        self.aggregation_size = Histogram(
            "demo_aggregation_size",
            "Number of elements per aggregation request",
            buckets=[0, 1, 5, 10, 50, 100, 500, 1000, 10000],
            registry=registry,
        )

        self.file_reads = Counter(
            "demo_file_reads_total",
            "File resolution attempts by result",
            ["mode", "result"],
            registry=registry,
        )


@lru_cache()
def get_http_metrics() -> HTTPMetrics:
    """Return the process-wide HTTP metrics, registering them once."""
    return HTTPMetrics()


@lru_cache()
def get_demo_metrics() -> DemoMetrics:
    """Return the process-wide demo metrics, registering them once."""
    return DemoMetrics()


def get_metrics_handler(registry: CollectorRegistry = REGISTRY) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(registry)

    return metrics_handler
