"""
Summing of nullable integer lists.

Faithful policy fails on the first null element; hardened policy skips
nulls. An empty list sums to 0 under both.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import structlog

from api.src.services.exceptions import NullElementError
from shared.models.common import StrategyMode

logger = structlog.get_logger(__name__)


class Aggregator(ABC):
    """Sums a list of possibly-null integers."""

    mode: StrategyMode

    @abstractmethod
    def total(self, numbers: Sequence[Optional[int]]) -> int:
        """
        Sum ``numbers``.

        Args:
            numbers: Integers, possibly containing None

        Returns:
            Integer sum
        """


class FailFastAggregator(Aggregator):
    """Raises NullElementError on the first null element."""

    mode = StrategyMode.FAITHFUL

    def total(self, numbers: Sequence[Optional[int]]) -> int:
        result = 0
        for index, value in enumerate(numbers):
            if value is None:
                logger.warning("aggregation_null_element", index=index, size=len(numbers))
                raise NullElementError(index)
            result += value
        return result


class SkipNullAggregator(Aggregator):
    """Ignores null elements."""

    mode = StrategyMode.HARDENED

    def total(self, numbers: Sequence[Optional[int]]) -> int:
        skipped = sum(1 for value in numbers if value is None)
        if skipped:
            logger.info("aggregation_nulls_skipped", skipped=skipped, size=len(numbers))
        return sum(value for value in numbers if value is not None)


def build_aggregator(mode: StrategyMode) -> Aggregator:
    """Create the aggregator for ``mode``."""
    if mode is StrategyMode.HARDENED:
        return SkipNullAggregator()
    return FailFastAggregator()
