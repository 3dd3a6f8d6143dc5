"""
User repository backed by read-only seed data.

The seed table is built once at application startup and shared by
reference; nothing mutates it afterwards, so concurrent reads need no lock.
"""

import structlog
from types import MappingProxyType
from typing import Mapping, Optional

from api.src.models.demo import UserRecord

logger = structlog.get_logger(__name__)


def build_seed_table(count: int) -> Mapping[str, UserRecord]:
    """
    Build the simulated user table.

    Args:
        count: Number of records; ids run from "1" to str(count)

    Returns:
        Read-only mapping of id to record
    """
    table = {
        str(n): UserRecord(id=str(n), name=f"User-{n}")
        for n in range(1, count + 1)
    }
    logger.info("user_seed_table_built", records=len(table))
    return MappingProxyType(table)


class UserRepository:
    """Repository for simulated user lookups."""

    def __init__(self, seed: Mapping[str, UserRecord], synthesize_unknown: bool = True):
        """
        Initialize user repository.

        Args:
            seed: Read-only seed table
            synthesize_unknown: Resolve ids missing from the seed table to a
                simulated ``User-<id>`` record instead of None
        """
        self._seed = seed
        self.synthesize_unknown = synthesize_unknown

    def __len__(self) -> int:
        return len(self._seed)

    def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        """
        Get user by id.

        Args:
            user_id: A validated identifier

        Returns:
            User record or None if not found
        """
        record = self._seed.get(user_id)
        if record is not None:
            return record

        if self.synthesize_unknown:
            return UserRecord(id=user_id, name=f"User-{user_id}")

        logger.debug("user_not_found", user_id_length=len(user_id))
        return None
