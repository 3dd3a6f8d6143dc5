"""
Unit tests for settings, logging context and metrics registration.

Tests cover:
- Behavior variant resolution with per-component overrides
- Environment variable loading
- Field validation and normalisation
- Application context added to log entries
- Metrics singletons
"""

import pytest
import structlog
from pydantic import ValidationError

from api.src.config import STRATEGY_COMPONENTS, Settings, clear_settings_cache, get_settings
from shared.logging import (
    bind_context,
    clear_context,
    get_logger,
    redact_sensitive_fields,
    request_context,
    unbind_context,
)
from shared.logging.structured_logger import add_app_context, configure_logging
from shared.metrics import get_demo_metrics, get_http_metrics
from shared.models.common import StrategyMode


# ============================================================================
# BEHAVIOR VARIANTS
# ============================================================================


class TestModeResolution:
    """Test Settings.mode_for."""

    def test_default_is_faithful(self):
        settings = Settings()

        assert all(
            mode is StrategyMode.FAITHFUL for mode in settings.strategy_summary().values()
        )
        assert set(settings.strategy_summary()) == set(STRATEGY_COMPONENTS)

    def test_global_mode(self):
        settings = Settings(behavior_mode="hardened")

        assert settings.mode_for("file_access") is StrategyMode.HARDENED
        assert settings.mode_for("error_detail") is StrategyMode.HARDENED

    def test_override_wins(self):
        settings = Settings(behavior_mode="hardened", aggregation_mode="faithful")

        assert settings.mode_for("aggregation") is StrategyMode.FAITHFUL
        assert settings.mode_for("comment_render") is StrategyMode.HARDENED

    def test_unknown_component(self):
        with pytest.raises(ValueError, match="Unknown strategy component"):
            Settings().mode_for("teleport")

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValidationError):
            Settings(behavior_mode="lenient")


# ============================================================================
# ENVIRONMENT AND VALIDATION
# ============================================================================


class TestSettingsLoading:
    """Test environment loading and validators."""

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("SECDEMO_BEHAVIOR_MODE", "hardened")
        monkeypatch.setenv("SECDEMO_EMAIL_CHECK_MODE", "faithful")
        monkeypatch.setenv("SECDEMO_ADMIN_PASSWORD", "from-env")
        monkeypatch.setenv("SECDEMO_USER_SEED_COUNT", "7")
        clear_settings_cache()

        settings = get_settings()

        assert settings.behavior_mode is StrategyMode.HARDENED
        assert settings.mode_for("email_check") is StrategyMode.FAITHFUL
        assert settings.admin_password.get_secret_value() == "from-env"
        assert settings.user_seed_count == 7

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_admin_password_hidden_in_repr(self):
        settings = Settings(admin_password="hunter2")

        assert "hunter2" not in repr(settings)

    @pytest.mark.parametrize(
        "prefix,expected",
        [("/api", "/api"), ("api/", "/api"), ("/v1/api/", "/v1/api"), ("/", "")],
    )
    def test_api_prefix_normalised(self, prefix, expected):
        assert Settings(api_prefix=prefix).api_prefix == expected

    def test_log_level_normalised(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("log_level", "verbose"),
            ("log_format", "xml"),
            ("environment", "qa"),
            ("password_bcrypt_rounds", 3),
            ("email_match_timeout_seconds", 0),
            ("port", 0),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_empty_cors_origins_become_wildcard(self):
        assert Settings(cors_origins=[]).cors_origins == ["*"]


# ============================================================================
# LOGGING AND METRICS
# ============================================================================


class TestAmbient:
    """Test logging context and metrics registration."""

    def test_app_context_added(self):
        configure_logging(log_level="WARNING", json_logs=False, environment="staging")
        try:
            event = add_app_context(None, "info", {"event": "user_registered"})
        finally:
            configure_logging(log_level="WARNING", json_logs=False, environment="development")

        assert event["app"] == "devsecops-demo-api"
        assert event["environment"] == "staging"

    def test_app_context_does_not_overwrite(self):
        event = add_app_context(None, "info", {"event": "x", "environment": "custom"})

        assert event["environment"] == "custom"

    def test_context_binding(self):
        bind_context(correlation_id="abc", user="alice")
        try:
            assert structlog.contextvars.get_contextvars()["correlation_id"] == "abc"

            unbind_context("user")
            assert "user" not in structlog.contextvars.get_contextvars()
        finally:
            clear_context()

        assert "correlation_id" not in structlog.contextvars.get_contextvars()

    def test_request_context_unbinds(self):
        with request_context("req-1", path="/api/file"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["correlation_id"] == "req-1"
            assert bound["path"] == "/api/file"

        bound = structlog.contextvars.get_contextvars()
        assert "correlation_id" not in bound
        assert "path" not in bound

    def test_sensitive_fields_redacted(self):
        event = redact_sensitive_fields(
            None, "info", {"event": "user_registered", "username": "alice", "password": "pw"}
        )

        assert event["password"] == "***"
        assert event["username"] == "alice"

    def test_get_logger_returns_usable_logger(self):
        logger = get_logger("tests.config")

        logger.debug("config_test_event", key="value")

    def test_metrics_are_singletons(self):
        assert get_demo_metrics() is get_demo_metrics()
        assert get_http_metrics() is get_http_metrics()
