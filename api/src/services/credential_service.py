"""
Credential hashing and the admin password check.

Provides:
- Password digests: unsalted single-round MD5 (faithful) or bcrypt (hardened)
- Admin check: hard-coded password (faithful) or configured secret compared
  in constant time (hardened)
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog
from passlib.context import CryptContext
from pydantic import SecretStr

from shared.models.common import StrategyMode
from shared.security.crypto import digest_length, hash_data, secure_compare

logger = structlog.get_logger(__name__)

LEGACY_DIGEST_ALGORITHM = "md5"
LEGACY_ADMIN_PASSWORD = "admin123"

ADMIN_GRANTED = "Admin access granted"
ADMIN_DENIED = "Access denied"


# ============================================================================
# Password Hashing
# ============================================================================


class CredentialHasher(ABC):
    """Derives a storable digest from a password."""

    mode: StrategyMode

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """
        Hash a password.

        Args:
            password: Plain text password (may be empty)

        Returns:
            Digest string
        """

    @abstractmethod
    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its digest.

        Args:
            plain_password: Plain text password
            hashed_password: Digest produced by hash_password

        Returns:
            True if password matches, False otherwise
        """


class FaithfulCredentialHasher(CredentialHasher):
    """Unsalted MD5: deterministic, fixed length, fast to brute force."""

    mode = StrategyMode.FAITHFUL
    algorithm = LEGACY_DIGEST_ALGORITHM

    @property
    def digest_length(self) -> int:
        return digest_length(self.algorithm)

    def hash_password(self, password: str) -> str:
        hashed = hash_data(password, algorithm=self.algorithm)
        logger.debug("password_hashed", algorithm=self.algorithm)
        return hashed

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return secure_compare(self.hash_password(plain_password), hashed_password)


class HardenedCredentialHasher(CredentialHasher):
    """Salted bcrypt through passlib."""

    mode = StrategyMode.HARDENED

    def __init__(self, rounds: int = 12):
        """
        Initialize the bcrypt hasher.

        Args:
            rounds: BCrypt cost factor
        """
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds
        )

    def hash_password(self, password: str) -> str:
        try:
            hashed = self.pwd_context.hash(password)
            logger.debug("password_hashed", algorithm="bcrypt")
            return hashed
        except Exception as e:
            logger.error("password_hash_failed", error=str(e))
            raise

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        try:
            verified = self.pwd_context.verify(plain_password, hashed_password)
            logger.debug("password_verified", verified=verified)
            return verified
        except Exception as e:
            logger.error("password_verify_failed", error=str(e))
            return False


def build_credential_hasher(mode: StrategyMode, bcrypt_rounds: int = 12) -> CredentialHasher:
    """Create the hasher for ``mode``."""
    if mode is StrategyMode.HARDENED:
        return HardenedCredentialHasher(rounds=bcrypt_rounds)
    return FaithfulCredentialHasher()


def registration_message(hasher: CredentialHasher, username: str, password: str) -> str:
    """Hash ``password`` and render the registration acknowledgement."""
    hashed = hasher.hash_password(password)
    logger.info("user_registered", username=username, hash_mode=hasher.mode.value)
    return f"User registered with hash: {hashed}"


# ============================================================================
# Admin Check
# ============================================================================


class AdminGate:
    """Grants admin access when the supplied password matches."""

    def __init__(self, mode: StrategyMode, admin_password: Optional[SecretStr] = None):
        """
        Initialize the gate.

        Args:
            mode: FAITHFUL compares against the legacy hard-coded password;
                HARDENED compares against ``admin_password``
            admin_password: Configured secret, hardened mode only
        """
        self.mode = mode
        self._admin_password = admin_password

    def _expected(self) -> Optional[str]:
        if self.mode is StrategyMode.FAITHFUL:
            return LEGACY_ADMIN_PASSWORD
        if self._admin_password is None:
            return None
        return self._admin_password.get_secret_value() or None

    def check(self, password: Optional[str]) -> bool:
        """
        Check a password.

        Args:
            password: Password supplied by the caller

        Returns:
            True if access is granted
        """
        expected = self._expected()
        if expected is None or password is None:
            granted = False
        elif self.mode is StrategyMode.FAITHFUL:
            granted = password == expected
        else:
            granted = secure_compare(password, expected)

        logger.info("admin_check", granted=granted, mode=self.mode.value)
        return granted

    def describe(self, password: Optional[str]) -> str:
        return ADMIN_GRANTED if self.check(password) else ADMIN_DENIED
