"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    DemoMetrics,
    HTTPMetrics,
    get_demo_metrics,
    get_http_metrics,
    get_metrics_handler,
)

__all__ = [
    "DemoMetrics",
    "HTTPMetrics",
    "get_demo_metrics",
    "get_http_metrics",
    "get_metrics_handler",
]
