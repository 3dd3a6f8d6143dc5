"""
Endpoints around the defect-carrying operations.

Provides:
- Registration with password digest
- File retrieval by name
- Integer aggregation
- Email syntax validation
- User level classification
- Profile intake, admin check, status and debug details

Failures raised by services propagate to the application's DemoError
handler, which owns status codes and the amount of detail returned.
"""

import structlog
from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, Form, Query, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import StrictInt

from api.src.dependencies import (
    get_admin_gate,
    get_aggregator,
    get_credential_hasher,
    get_debug_info,
    get_email_checker,
    get_file_resolver,
    get_level_classifier,
    get_metrics,
    get_profile_processor,
)
from api.src.models.demo import DebugInfo, ErrorResponse, ProfileBundle, ScoreProfile
from api.src.services.aggregation_service import Aggregator
from api.src.services.credential_service import AdminGate, CredentialHasher, registration_message
from api.src.services.debug_service import DebugInfoProvider
from api.src.services.email_service import EmailSyntaxChecker, format_email_result
from api.src.services.exceptions import (
    AccessDenied,
    DemoError,
    MatcherTimeout,
    NullElementError,
    ResourceNotFound,
)
from api.src.services.file_service import FilePathResolver
from api.src.services.level_service import UserLevelClassifier
from api.src.services.profile_service import PROFILE_UPDATED, ProfileProcessor
from shared.metrics import DemoMetrics

logger = structlog.get_logger(__name__)

STATUS_MESSAGE = "Service is running"

router = APIRouter(
    tags=["Demo"],
    default_response_class=PlainTextResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        403: {"model": ErrorResponse, "description": "Access denied"},
        404: {"model": ErrorResponse, "description": "Not found"},
        500: {"model": ErrorResponse, "description": "Fault"},
    },
)


@router.post("/register", summary="Register user")
async def register_user(
    username: str = Form(...),
    password: str = Form(""),
    hasher: CredentialHasher = Depends(get_credential_hasher),
) -> str:
    """Hash the password and acknowledge with its digest."""
    return registration_message(hasher, username, password)


@router.get(
    "/file",
    summary="Read file",
    description="""
    Return the raw content of a file under the configured base directory.

    In faithful mode the filename is concatenated to the base directory
    without a containment check.
    """,
)
def read_file(
    filename: str = Query(...),
    resolver: FilePathResolver = Depends(get_file_resolver),
    metrics: Optional[DemoMetrics] = Depends(get_metrics),
) -> Response:
    result = "ok"
    try:
        content = resolver.read(filename)
    except ResourceNotFound:
        result = "not_found"
        raise
    except AccessDenied:
        result = "denied"
        raise
    except DemoError:
        result = "invalid"
        raise
    finally:
        if metrics is not None:
            metrics.file_reads.labels(mode=resolver.mode.value, result=result).inc()

    return Response(content=content, media_type="text/plain")


@router.post("/calculate", summary="Sum integers")
async def calculate_total(
    numbers: List[Optional[StrictInt]] = Body(...),
    aggregator: Aggregator = Depends(get_aggregator),
    metrics: Optional[DemoMetrics] = Depends(get_metrics),
) -> str:
    if metrics is not None:
        metrics.aggregation_size.observe(len(numbers))

    try:
        total = aggregator.total(numbers)
    except NullElementError:
        if metrics is not None:
            metrics.aggregation_faults.inc()
        raise

    return f"Total: {total}"


@router.get("/validate-email", summary="Validate email syntax")
async def validate_email(
    email: Optional[str] = Query(None),
    checker: EmailSyntaxChecker = Depends(get_email_checker),
    metrics: Optional[DemoMetrics] = Depends(get_metrics),
) -> str:
    try:
        valid = checker.is_valid(email)
    except MatcherTimeout:
        if metrics is not None:
            metrics.email_checks.labels(mode=checker.mode.value, result="timeout").inc()
        raise

    if metrics is not None:
        metrics.email_checks.labels(
            mode=checker.mode.value, result="valid" if valid else "invalid"
        ).inc()
    return format_email_result(valid)


@router.get("/user-level", summary="Classify user level")
async def get_user_level(
    score: int = Query(...),
    is_premium: bool = Query(..., alias="isPremium"),
    user_type: str = Query(..., alias="userType"),
    years_active: int = Query(..., alias="yearsActive"),
    has_referrals: bool = Query(..., alias="hasReferrals"),
    classifier: UserLevelClassifier = Depends(get_level_classifier),
    metrics: Optional[DemoMetrics] = Depends(get_metrics),
) -> str:
    profile = ScoreProfile(
        score=score,
        is_premium=is_premium,
        user_type=user_type,
        years_active=years_active,
        has_referrals=has_referrals,
    )
    level = classifier.classify(profile)

    if metrics is not None:
        metrics.levels_assigned.labels(level=level.value).inc()
    return f"User level: {level.value}"


@router.post("/profile", summary="Update profile")
async def update_profile(
    profile: Annotated[ProfileBundle, Form()],
    processor: ProfileProcessor = Depends(get_profile_processor),
) -> str:
    processor.process(profile)
    return PROFILE_UPDATED


@router.get("/admin-check", summary="Admin password check")
async def admin_check(
    password: Optional[str] = Query(None),
    gate: AdminGate = Depends(get_admin_gate),
) -> str:
    return gate.describe(password)


@router.get("/status", summary="Status string")
async def get_status() -> str:
    return STATUS_MESSAGE


@router.get(
    "/debug/info",
    summary="Debug details",
    response_class=JSONResponse,
    response_model=DebugInfo,
)
async def get_debug_details(
    debug_info: DebugInfoProvider = Depends(get_debug_info),
) -> DebugInfo:
    return debug_info.info()
