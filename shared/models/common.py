"""Common Pydantic models shared across services."""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class HealthStatus(str, Enum):
    """Health status enum."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


class StrategyMode(str, Enum):
    """Behavior variant selected for a defect-carrying operation.

    - FAITHFUL: reproduces the legacy contract, weaknesses included
    - HARDENED: safety-improved alternative of the same operation
    """

    FAITHFUL = "faithful"
    HARDENED = "hardened"


class ServiceInfo(BaseModel):
    """Service information model."""

    model_config = ConfigDict(use_enum_values=True)

    service_name: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    status: HealthStatus = Field(..., description="Service health status")
    environment: str = Field(..., description="Deployment environment")
    uptime_seconds: float = Field(..., description="Service uptime in seconds")
    strategies: Dict[str, StrategyMode] = Field(
        default_factory=dict, description="Active behavior variant per component"
    )
