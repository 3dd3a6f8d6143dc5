"""
Identifier validation and user lookup.

Validation turns a raw path segment into a descriptive result; lookup runs
only on identifiers that validated.
"""

import structlog
from typing import Optional

from api.src.models.demo import IdentifierResult, IdentifierStatus, UserRecord
from api.src.repositories.user_repo import UserRepository
from shared.metrics import DemoMetrics

logger = structlog.get_logger(__name__)

_ASCII_DIGITS = frozenset("0123456789")

INVALID_ID_MESSAGE = "Invalid user ID"
USER_NOT_FOUND_MESSAGE = "User not found"


def validate_identifier(raw: Optional[str]) -> IdentifierResult:
    """
    Classify a raw identifier.

    No length or magnitude bound applies; leading zeros are kept.

    Args:
        raw: Identifier as received, possibly None or empty

    Returns:
        IdentifierResult with status MISSING, NON_NUMERIC or VALID
    """
    if not raw:
        return IdentifierResult(status=IdentifierStatus.MISSING)

    if not all(ch in _ASCII_DIGITS for ch in raw):
        return IdentifierResult(status=IdentifierStatus.NON_NUMERIC)

    return IdentifierResult(status=IdentifierStatus.VALID, value=raw)


class UserLookupService:
    """Resolves validated identifiers against the user repository."""

    def __init__(self, user_repo: UserRepository, metrics: Optional[DemoMetrics] = None):
        self.user_repo = user_repo
        self.metrics = metrics

    def lookup(self, user_id: str) -> Optional[UserRecord]:
        """
        Look up a validated identifier.

        Args:
            user_id: Identifier that passed validate_identifier

        Returns:
            User record, or None when the id is unknown
        """
        return self.user_repo.get_user_by_id(user_id)

    def describe(self, raw: Optional[str]) -> str:
        """
        Validate ``raw`` and render the lookup outcome as response text.

        Args:
            raw: Identifier as received

        Returns:
            "Invalid user ID", "User not found" or "User found: <name>"
        """
        result = validate_identifier(raw)
        logger.debug("identifier_classified", status=result.status.value)
        if self.metrics is not None:
            self.metrics.identifiers_classified.labels(outcome=result.status.value).inc()

        if result.status is IdentifierStatus.MISSING:
            return INVALID_ID_MESSAGE
        if not result.is_valid:
            return USER_NOT_FOUND_MESSAGE

        record = self.lookup(result.value)
        if self.metrics is not None:
            self.metrics.user_lookups.labels(result="found" if record else "not_found").inc()
        if record is None:
            return USER_NOT_FOUND_MESSAGE
        return f"User found: {record.name}"
