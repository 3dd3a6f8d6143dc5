"""Shared Pydantic models for the demo service."""

from .common import HealthStatus, ServiceInfo, StrategyMode

__all__ = [
    "HealthStatus",
    "ServiceInfo",
    "StrategyMode",
]
