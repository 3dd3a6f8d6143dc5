"""
FastAPI dependency injection for the validation services.

The service container is built once during application startup from the
active settings and stored on ``app.state``; request handlers receive the
individual services through the dependency functions below.
"""

import structlog
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from api.src.config import Settings
from api.src.repositories.user_repo import UserRepository, build_seed_table
from api.src.services.aggregation_service import Aggregator, build_aggregator
from api.src.services.comment_service import CommentRenderer, build_comment_renderer
from api.src.services.credential_service import (
    AdminGate,
    CredentialHasher,
    build_credential_hasher,
)
from api.src.services.debug_service import DebugInfoProvider
from api.src.services.email_service import EmailSyntaxChecker, build_email_checker
from api.src.services.file_service import FilePathResolver, build_file_resolver
from api.src.services.identifier_service import UserLookupService
from api.src.services.level_service import UserLevelClassifier
from api.src.services.profile_service import ProfileProcessor
from shared.metrics import DemoMetrics

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ServiceContainer:
    """Services shared by every request for the lifetime of the app."""

    settings: Settings
    user_lookup: UserLookupService
    comment_renderer: CommentRenderer
    credential_hasher: CredentialHasher
    admin_gate: AdminGate
    email_checker: EmailSyntaxChecker
    level_classifier: UserLevelClassifier
    aggregator: Aggregator
    file_resolver: FilePathResolver
    profile_processor: ProfileProcessor
    debug_info: DebugInfoProvider
    metrics: Optional[DemoMetrics] = None


def build_services(settings: Settings, metrics: Optional[DemoMetrics] = None) -> ServiceContainer:
    """
    Build every service from settings.

    Args:
        settings: Active settings
        metrics: Demo metrics, or None when metrics are disabled

    Returns:
        ServiceContainer
    """
    user_repo = UserRepository(
        build_seed_table(settings.user_seed_count),
        synthesize_unknown=settings.user_synthesize_unknown,
    )

    container = ServiceContainer(
        settings=settings,
        user_lookup=UserLookupService(user_repo, metrics=metrics),
        comment_renderer=build_comment_renderer(settings.mode_for("comment_render")),
        credential_hasher=build_credential_hasher(
            settings.mode_for("password_hash"),
            bcrypt_rounds=settings.password_bcrypt_rounds,
        ),
        admin_gate=AdminGate(settings.mode_for("admin_check"), settings.admin_password),
        email_checker=build_email_checker(
            settings.mode_for("email_check"),
            max_length=settings.email_max_length,
            timeout=settings.email_match_timeout_seconds,
        ),
        level_classifier=UserLevelClassifier(),
        aggregator=build_aggregator(settings.mode_for("aggregation")),
        file_resolver=build_file_resolver(settings.mode_for("file_access"), settings.file_base_dir),
        profile_processor=ProfileProcessor(),
        debug_info=DebugInfoProvider(
            settings.mode_for("debug_info"),
            version=settings.app_version,
            file_base_dir=str(settings.file_base_dir),
        ),
        metrics=metrics,
    )

    logger.info(
        "services_initialized",
        user_records=len(user_repo),
        strategies={name: mode.value for name, mode in settings.strategy_summary().items()},
    )
    return container


# ============================================================================
# REQUEST DEPENDENCIES
# ============================================================================


def get_services(request: Request) -> ServiceContainer:
    """
    Get the service container of the running app.

    Raises:
        RuntimeError: If called before application startup
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        logger.error("services_not_initialized")
        raise RuntimeError("Services not initialized. Start the app through its lifespan.")
    return services


def get_user_lookup(services: ServiceContainer = Depends(get_services)) -> UserLookupService:
    return services.user_lookup


def get_comment_renderer(services: ServiceContainer = Depends(get_services)) -> CommentRenderer:
    return services.comment_renderer


def get_credential_hasher(services: ServiceContainer = Depends(get_services)) -> CredentialHasher:
    return services.credential_hasher


def get_admin_gate(services: ServiceContainer = Depends(get_services)) -> AdminGate:
    return services.admin_gate


def get_email_checker(services: ServiceContainer = Depends(get_services)) -> EmailSyntaxChecker:
    return services.email_checker


def get_level_classifier(services: ServiceContainer = Depends(get_services)) -> UserLevelClassifier:
    return services.level_classifier


def get_aggregator(services: ServiceContainer = Depends(get_services)) -> Aggregator:
    return services.aggregator


def get_file_resolver(services: ServiceContainer = Depends(get_services)) -> FilePathResolver:
    return services.file_resolver


def get_profile_processor(services: ServiceContainer = Depends(get_services)) -> ProfileProcessor:
    return services.profile_processor


def get_debug_info(services: ServiceContainer = Depends(get_services)) -> DebugInfoProvider:
    return services.debug_info


def get_metrics(services: ServiceContainer = Depends(get_services)) -> Optional[DemoMetrics]:
    return services.metrics
