"""
Contract tests for the demo API.

Tests verify the API contract:
- Request schemas (profile bundle, score profile aliases)
- Error response schema and status codes per error category
- Route table published in the OpenAPI document
- Plain text content type of string endpoints
"""

import pytest
from pydantic import ValidationError

from api.src.models.demo import ErrorResponse, ProfileBundle, ScoreProfile
from api.src.services.exceptions import (
    AccessDenied,
    DemoError,
    Fault,
    InvalidInput,
    MatcherTimeout,
    NullElementError,
    ResourceNotFound,
)

PROFILE_FIELDS = (
    "name", "email", "phone", "address", "city",
    "state", "zip", "country", "company", "department",
)


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================


class TestProfileBundleSchema:
    """Test the ten-field profile schema."""

    def test_exact_fields(self):
        assert tuple(ProfileBundle.model_fields) == PROFILE_FIELDS

    def test_every_field_required(self):
        values = {field: "x" for field in PROFILE_FIELDS}
        values.pop("zip")

        with pytest.raises(ValidationError) as exc_info:
            ProfileBundle(**values)

        assert exc_info.value.errors()[0]["loc"] == ("zip",)

    def test_immutable(self):
        bundle = ProfileBundle(**{field: "x" for field in PROFILE_FIELDS})

        with pytest.raises(ValidationError):
            bundle.name = "changed"


class TestScoreProfileSchema:
    """Test the classifier input schema."""

    def test_accepts_wire_aliases(self):
        profile = ScoreProfile.model_validate(
            {"score": 10, "isPremium": True, "userType": "vip", "yearsActive": 2, "hasReferrals": False}
        )

        assert profile.is_premium is True
        assert profile.user_type == "vip"
        assert profile.years_active == 2

    def test_accepts_field_names(self):
        profile = ScoreProfile(
            score=10, is_premium=False, user_type="", years_active=0, has_referrals=True
        )

        assert profile.has_referrals is True

    def test_rejects_non_integer_score(self):
        with pytest.raises(ValidationError):
            ScoreProfile(score="high", is_premium=False, user_type="", years_active=0, has_referrals=False)


# ============================================================================
# ERROR SCHEMA
# ============================================================================


class TestErrorContract:
    """Test error categories and their response schema."""

    @pytest.mark.parametrize(
        "error,status_code",
        [
            (InvalidInput("bad"), 400),
            (AccessDenied("no"), 403),
            (ResourceNotFound("gone"), 404),
            (Fault("boom"), 500),
            (NullElementError(3), 500),
            (MatcherTimeout(0.1, 60), 500),
        ],
    )
    def test_status_codes(self, error, status_code):
        assert isinstance(error, DemoError)
        assert error.status_code == status_code

    def test_error_codes_unique(self):
        codes = [cls.error_code for cls in (InvalidInput, AccessDenied, ResourceNotFound, Fault, NullElementError, MatcherTimeout)]

        assert len(set(codes)) == len(codes)

    def test_default_message_is_public_message(self):
        assert ResourceNotFound().message == "Not found"

    def test_error_response_requires_detail(self):
        with pytest.raises(ValidationError):
            ErrorResponse(detail="")

        assert ErrorResponse(detail="Access denied", error_code="ACCESS_001").error_code == "ACCESS_001"


# ============================================================================
# ROUTE TABLE
# ============================================================================


class TestRouteTable:
    """Test the published routes."""

    EXPECTED_ROUTES = {
        "/api/": {"get"},
        "/api/health": {"get"},
        "/api/user/": {"get"},
        "/api/user/{user_id}": {"get"},
        "/api/comment": {"post"},
        "/api/debug": {"get"},
        "/api/register": {"post"},
        "/api/file": {"get"},
        "/api/calculate": {"post"},
        "/api/validate-email": {"get"},
        "/api/user-level": {"get"},
        "/api/profile": {"post"},
        "/api/admin-check": {"get"},
        "/api/status": {"get"},
        "/api/debug/info": {"get"},
        "/health": {"get"},
        "/metrics": {"get"},
    }

    def test_openapi_paths(self, client):
        schema = client.get("/openapi.json").json()

        for path, methods in self.EXPECTED_ROUTES.items():
            assert path in schema["paths"], path
            assert set(schema["paths"][path]) == methods

    def test_user_level_query_aliases(self, client):
        schema = client.get("/openapi.json").json()
        names = {p["name"] for p in schema["paths"]["/api/user-level"]["get"]["parameters"]}

        assert names == {"score", "isPremium", "userType", "yearsActive", "hasReferrals"}

    def test_docs_hidden_in_production(self, make_client):
        client = make_client(environment="production")

        assert client.get("/openapi.json").status_code == 404
        assert client.get("/docs").status_code == 404
        assert client.get("/api/status").status_code == 200

    def test_custom_prefix(self, make_client):
        client = make_client(api_prefix="/v2")

        assert client.get("/v2/status").text == "Service is running"
        assert client.get("/api/status").status_code == 404

    @pytest.mark.parametrize("path", ["/api/", "/api/health", "/api/status", "/api/user/1"])
    def test_plain_text_content_type(self, client, path):
        response = client.get(path)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
