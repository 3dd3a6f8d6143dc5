"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- API settings (name, version, prefix, bind address)
- Behavior variants (faithful vs hardened) per component
- Seed data for the simulated user table
- File resolution base directory
- Credential hashing and email matching limits
- CORS, security headers, logging and metrics

All settings support environment variable overrides and .env file loading.
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from shared.models.common import StrategyMode

# Components whose behavior can be switched between variants
STRATEGY_COMPONENTS = (
    "comment_render",
    "password_hash",
    "email_check",
    "aggregation",
    "file_access",
    "error_detail",
    "debug_info",
    "admin_check",
)

_CHOICES = {
    "log_level": ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
    "environment": ("development", "staging", "production"),
    "log_format": ("json", "text"),
}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    prefix "SECDEMO_" (e.g., SECDEMO_BEHAVIOR_MODE=hardened).

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="DevSecOps Demo Application",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_prefix: str = Field(
        default="/api",
        description="API URL prefix"
    )

    debug: bool = Field(
        default=False,
        description="Debug mode - enables uvicorn reload"
    )
    environment: str = Field(
        default="development",
        description="Environment: development|staging|production"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=8080,
        description="API bind port",
        gt=0,
        lt=65536
    )

    # =========================================================================
    # Behavior Variants
    # =========================================================================

    behavior_mode: StrategyMode = Field(
        default=StrategyMode.FAITHFUL,
        description="Default variant for every defect-carrying component"
    )
    comment_render_mode: Optional[StrategyMode] = Field(
        default=None,
        description="Override: unescaped (faithful) or HTML-escaped (hardened) comments"
    )
    password_hash_mode: Optional[StrategyMode] = Field(
        default=None,
        description="Override: unsalted MD5 (faithful) or bcrypt (hardened)"
    )
    email_check_mode: Optional[StrategyMode] = Field(
        default=None,
        description="Override: backtracking pattern with timeout or linear pattern with length cap"
    )
    aggregation_mode: Optional[StrategyMode] = Field(
        default=None,
        description="Override: fail on null elements (faithful) or skip them (hardened)"
    )
    file_access_mode: Optional[StrategyMode] = Field(
        default=None,
        description="Override: raw path concatenation or containment-checked resolution"
    )
    error_detail_mode: Optional[StrategyMode] = Field(
        default=None,
        description="Override: echo raw failure detail or return generic messages"
    )
    debug_info_mode: Optional[StrategyMode] = Field(
        default=None,
        description="Override: expose runtime details or version only"
    )
    admin_check_mode: Optional[StrategyMode] = Field(
        default=None,
        description="Override: hard-coded admin password or configured secret"
    )

    # =========================================================================
    # User Seed Data
    # =========================================================================

    user_seed_count: int = Field(
        default=1000,
        description="Number of seeded user records (ids 1..N)",
        ge=0,
        le=1_000_000
    )
    user_synthesize_unknown: bool = Field(
        default=True,
        description="Resolve any valid id missing from the seed table to a simulated record"
    )

    # =========================================================================
    # File Resolution
    # =========================================================================

    file_base_dir: Path = Field(
        default=Path("./files"),
        description="Base directory that /file requests are resolved against"
    )

    # =========================================================================
    # Credential Settings
    # =========================================================================

    password_bcrypt_rounds: int = Field(
        default=12,
        description="BCrypt hash rounds for the hardened hasher",
        ge=4,
        le=14
    )
    admin_password: Optional[SecretStr] = Field(
        default=None,
        description="Admin password for the hardened admin check (denied when unset)"
    )

    # =========================================================================
    # Email Matching
    # =========================================================================

    email_max_length: int = Field(
        default=254,
        description="Longest address the hardened checker will evaluate",
        gt=0,
        le=4096
    )
    email_match_timeout_seconds: float = Field(
        default=0.1,
        description="Wall-clock limit for the backtracking matcher (seconds)",
        gt=0.0,
        le=10.0
    )

    # =========================================================================
    # CORS Settings
    # =========================================================================

    cors_enabled: bool = Field(
        default=True,
        description="Enable CORS middleware"
    )
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials (cookies, authorization headers) in CORS"
    )
    cors_allow_methods: List[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="Allowed HTTP methods"
    )
    cors_allow_headers: List[str] = Field(
        default=["*"],
        description="Allowed HTTP headers"
    )

    # =========================================================================
    # Security Headers
    # =========================================================================

    security_headers_enabled: bool = Field(
        default=True,
        description="Enable security headers (X-Frame-Options, etc.)"
    )

    # =========================================================================
    # Logging and Metrics
    # =========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Enable Prometheus metrics"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level", "environment", "log_format")
    @classmethod
    def validate_choice(cls, v: str, info: ValidationInfo) -> str:
        """Normalise case and check the value against the field's choices."""
        allowed = _CHOICES[info.field_name]
        normalised = v.upper() if info.field_name == "log_level" else v.lower()
        if normalised not in allowed:
            raise ValueError(f"{info.field_name} must be one of {list(allowed)}, got: {v}")
        return normalised

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalise the prefix to a leading slash and no trailing slash."""
        v = "/" + v.strip("/")
        return "" if v == "/" else v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: List[str]) -> List[str]:
        """Validate CORS origins are not empty."""
        if not v:
            return ["*"]
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def docs_enabled(self) -> bool:
        """Interactive API docs are served outside production only."""
        return self.environment != "production"

    def mode_for(self, component: str) -> StrategyMode:
        """
        Resolve the behavior variant for a component.

        A per-component override wins over ``behavior_mode``.

        Args:
            component: One of STRATEGY_COMPONENTS

        Returns:
            StrategyMode: Variant to use

        Raises:
            ValueError: If the component is unknown
        """
        if component not in STRATEGY_COMPONENTS:
            raise ValueError(f"Unknown strategy component: {component}")
        override = getattr(self, f"{component}_mode")
        return override if override is not None else self.behavior_mode

    def strategy_summary(self) -> Dict[str, StrategyMode]:
        """Return the resolved variant of every component."""
        return {name: self.mode_for(name) for name in STRATEGY_COMPONENTS}

    # =========================================================================
    # Model Config
    # =========================================================================

    model_config = SettingsConfigDict(
        env_prefix="SECDEMO_",   # Environment variable prefix
        env_file=".env",         # Load from .env file
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",          # Ignore extra environment variables
        validate_default=True,   # Validate default values
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded from:
    1. Environment variables with SECDEMO_ prefix
    2. .env file in the current directory
    3. Default values

    Returns:
        Settings: Cached settings instance

    Example:
        >>> from api.src.config import get_settings
        >>> settings = get_settings()
        >>> settings.mode_for("aggregation")
        <StrategyMode.FAITHFUL: 'faithful'>
    """
    return Settings()


def clear_settings_cache():
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
