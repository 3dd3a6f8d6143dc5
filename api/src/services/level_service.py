"""
User level classification.

Levels come from an ordered decision table evaluated top to bottom; the
first matching rule wins and the last rule always matches, so every
profile maps to exactly one level. Thresholds are inclusive: a score equal
to a threshold belongs to the higher tier.
"""

from dataclasses import dataclass
from typing import Callable, Sequence, Tuple

import structlog

from api.src.models.demo import ScoreProfile, UserLevel

logger = structlog.get_logger(__name__)

PLATINUM_SCORE = 90
VIP_PLATINUM_SCORE = 80
GOLD_SCORE = 75
BUSINESS_GOLD_SCORE = 60
SILVER_SCORE = 50
BRONZE_SCORE = 25


def _user_type(profile: ScoreProfile) -> str:
    return profile.user_type.strip().lower()


@dataclass(frozen=True)
class DecisionRule:
    """One row of the decision table."""

    name: str
    predicate: Callable[[ScoreProfile], bool]
    level: UserLevel

    def matches(self, profile: ScoreProfile) -> bool:
        return self.predicate(profile)


DEFAULT_RULES: Tuple[DecisionRule, ...] = (
    DecisionRule(
        "premium_veteran",
        lambda p: p.score >= PLATINUM_SCORE and p.is_premium and p.years_active >= 5,
        UserLevel.PLATINUM,
    ),
    DecisionRule(
        "vip_referrer",
        lambda p: _user_type(p) == "vip" and p.score >= VIP_PLATINUM_SCORE and p.has_referrals,
        UserLevel.PLATINUM,
    ),
    DecisionRule(
        "high_score_engaged",
        lambda p: p.score >= GOLD_SCORE and (p.is_premium or p.has_referrals),
        UserLevel.GOLD,
    ),
    DecisionRule(
        "established_business",
        lambda p: _user_type(p) == "business" and p.score >= BUSINESS_GOLD_SCORE and p.years_active >= 3,
        UserLevel.GOLD,
    ),
    DecisionRule(
        "active_mid_score",
        lambda p: p.score >= SILVER_SCORE and p.years_active >= 1,
        UserLevel.SILVER,
    ),
    DecisionRule(
        "premium_referrer",
        lambda p: p.is_premium and p.has_referrals,
        UserLevel.SILVER,
    ),
    DecisionRule(
        "entry",
        lambda p: p.score >= BRONZE_SCORE or p.years_active >= 2,
        UserLevel.BRONZE,
    ),
    DecisionRule(
        "default",
        lambda p: True,
        UserLevel.BASIC,
    ),
)


class UserLevelClassifier:
    """First-match-wins evaluation of a decision table."""

    def __init__(self, rules: Sequence[DecisionRule] = DEFAULT_RULES):
        """
        Initialize the classifier.

        Args:
            rules: Ordered rules; the last one must accept every profile

        Raises:
            ValueError: If no rules are given
        """
        if not rules:
            raise ValueError("Decision table needs at least a default rule")
        self.rules = tuple(rules)

    def matching_rule(self, profile: ScoreProfile) -> DecisionRule:
        """Return the first rule that accepts ``profile``."""
        for rule in self.rules:
            if rule.matches(profile):
                return rule
        # Reached only when a custom table lacks a catch-all row
        return DecisionRule("fallback", lambda p: True, UserLevel.BASIC)

    def classify(self, profile: ScoreProfile) -> UserLevel:
        """
        Classify a score profile.

        Args:
            profile: The five classification inputs

        Returns:
            The level of the first matching rule
        """
        rule = self.matching_rule(profile)
        logger.debug("user_level_classified", rule=rule.name, level=rule.level.value)
        return rule.level
