"""
Value types for the request validation layer.

Provides Pydantic models and enums for:
- Identifier validation results and user records
- Score profiles and user levels
- Profile bundles and their acknowledgement
- Error responses

Every value is built fresh per request and never mutated.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Identifiers and Users
# ============================================================================


class IdentifierStatus(str, Enum):
    """Outcome of identifier validation."""

    MISSING = "missing"
    NON_NUMERIC = "non_numeric"
    VALID = "valid"


class IdentifierResult(BaseModel):
    """Classified identifier. ``value`` is set only when status is VALID."""

    model_config = ConfigDict(frozen=True)

    status: IdentifierStatus
    value: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.status is IdentifierStatus.VALID


class UserRecord(BaseModel):
    """Simulated user row from the seed table."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


# ============================================================================
# User Levels
# ============================================================================


class UserLevel(str, Enum):
    """Levels assigned by the classifier, highest first."""

    PLATINUM = "Platinum"
    GOLD = "Gold"
    SILVER = "Silver"
    BRONZE = "Bronze"
    BASIC = "Basic"


class ScoreProfile(BaseModel):
    """The five inputs the level classifier decides on."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    score: int
    is_premium: bool = Field(..., alias="isPremium")
    user_type: str = Field(..., alias="userType")
    years_active: int = Field(..., alias="yearsActive")
    has_referrals: bool = Field(..., alias="hasReferrals")


# ============================================================================
# Profiles
# ============================================================================


class ProfileBundle(BaseModel):
    """Ten independent profile fields, accepted as-is."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    zip: str
    country: str
    company: str
    department: str


class ProfileAck(BaseModel):
    """Acknowledgement returned after a profile bundle is accepted."""

    model_config = ConfigDict(frozen=True)

    role: str
    fields_received: int
    profile: ProfileBundle


# ============================================================================
# Responses
# ============================================================================


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str = Field(..., min_length=1)
    error_code: Optional[str] = None


class DebugInfo(BaseModel):
    """Debug details exposed by /debug/info."""

    version: str
    details: Dict[str, Any] = Field(default_factory=dict)
