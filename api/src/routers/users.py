"""
Core user-facing endpoints.

Provides:
- Greeting and health strings
- User lookup by identifier
- Comment submission
- Debug banner

Every handler calls one service and returns its result as plain text.
"""

import structlog
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import PlainTextResponse

from api.src.dependencies import get_comment_renderer, get_debug_info, get_user_lookup
from api.src.services.comment_service import CommentRenderer
from api.src.services.debug_service import DebugInfoProvider
from api.src.services.identifier_service import UserLookupService

logger = structlog.get_logger(__name__)

HOME_MESSAGE = "DevSecOps Demo Application - Version 1.0"
HEALTH_MESSAGE = "Application is running"

router = APIRouter(
    tags=["Users"],
    default_response_class=PlainTextResponse,
)


@router.get("/", summary="Greeting")
async def home() -> str:
    return HOME_MESSAGE


@router.get("/health", summary="Liveness string")
async def health() -> str:
    return HEALTH_MESSAGE


@router.get("/user/", summary="User lookup without an id")
async def get_user_missing_id(
    lookup: UserLookupService = Depends(get_user_lookup),
) -> str:
    """An empty identifier is reported as invalid."""
    return lookup.describe(None)


@router.get(
    "/user/{user_id}",
    summary="User lookup",
    description="""
    Validate the identifier and look it up in the seed table.

    **Responses (always 200):**
    - "User found: User-<id>" for a known numeric id
    - "User not found" for non-numeric or unknown ids
    - "Invalid user ID" for an empty id
    """,
)
async def get_user(
    user_id: str,
    lookup: UserLookupService = Depends(get_user_lookup),
) -> str:
    return lookup.describe(user_id)


@router.post("/comment", summary="Add comment")
async def add_comment(
    comment: Optional[str] = Form(None),
    renderer: CommentRenderer = Depends(get_comment_renderer),
) -> str:
    """
    Render a submitted comment.

    In faithful mode the comment is echoed without output encoding.
    """
    return renderer.render(comment)


@router.get("/debug", summary="Debug banner")
async def debug(debug_info: DebugInfoProvider = Depends(get_debug_info)) -> str:
    return debug_info.banner()
