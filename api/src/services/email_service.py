"""
Email syntax checking.

The faithful checker evaluates the legacy nested-quantifier pattern, which
backtracks catastrophically on inputs like ``"a" * 50 + "!"``; it runs on
the ``regex`` engine with a wall-clock timeout so a request can never hang.
The hardened checker uses a pattern without nested repetition and refuses
inputs longer than a fixed cap.
"""

import re
import time
from abc import ABC, abstractmethod
from typing import Optional

import regex
import structlog

from api.src.services.exceptions import MatcherTimeout
from shared.models.common import StrategyMode

logger = structlog.get_logger(__name__)

LEGACY_EMAIL_PATTERN = r"^([a-zA-Z0-9_\-\.]+)+@([a-zA-Z0-9_\-\.]+)+\.([a-zA-Z]{2,5})$"

LINEAR_EMAIL_PATTERN = (
    r"[A-Za-z0-9._%+\-]+"
    r"@[A-Za-z0-9\-]+(?:\.[A-Za-z0-9\-]+)*"
    r"\.[A-Za-z]{2,63}"
)


class EmailSyntaxChecker(ABC):
    """Tests whether a string has the shape of an email address."""

    mode: StrategyMode

    def is_valid(self, email: Optional[str]) -> bool:
        """
        Check an address.

        Args:
            email: Candidate string, possibly None or empty

        Returns:
            True if the whole string matches

        Raises:
            MatcherTimeout: If evaluation exceeds its time budget
        """
        if not email:
            return False
        return self._matches(email)

    @abstractmethod
    def _matches(self, email: str) -> bool:
        """Evaluate the pattern against a non-empty string."""


class FaithfulEmailChecker(EmailSyntaxChecker):
    """Legacy backtracking pattern, cut off after ``timeout`` seconds."""

    mode = StrategyMode.FAITHFUL

    def __init__(self, timeout: float = 0.1):
        self.timeout = timeout
        self._pattern = regex.compile(LEGACY_EMAIL_PATTERN)

    def _matches(self, email: str) -> bool:
        start = time.perf_counter()
        try:
            return self._pattern.fullmatch(email, timeout=self.timeout) is not None
        except TimeoutError as e:
            logger.warning(
                "email_match_timeout",
                length=len(email),
                elapsed=f"{time.perf_counter() - start:.3f}s",
            )
            raise MatcherTimeout(self.timeout, len(email)) from e


class HardenedEmailChecker(EmailSyntaxChecker):
    """Linear pattern behind an explicit length cap."""

    mode = StrategyMode.HARDENED

    def __init__(self, max_length: int = 254):
        self.max_length = max_length
        self._pattern = re.compile(LINEAR_EMAIL_PATTERN)

    def _matches(self, email: str) -> bool:
        if len(email) > self.max_length:
            logger.info("email_rejected_length", length=len(email), max_length=self.max_length)
            return False
        return self._pattern.fullmatch(email) is not None


def build_email_checker(
    mode: StrategyMode,
    max_length: int = 254,
    timeout: float = 0.1,
) -> EmailSyntaxChecker:
    """Create the checker for ``mode``."""
    if mode is StrategyMode.HARDENED:
        return HardenedEmailChecker(max_length=max_length)
    return FaithfulEmailChecker(timeout=timeout)


def format_email_result(valid: bool) -> str:
    return f"Email valid: {str(valid).lower()}"
