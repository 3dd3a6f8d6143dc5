"""
Unit tests for credential hashing, the admin check and digest helpers.

Tests cover:
- Unsalted MD5 digests (faithful)
- Salted bcrypt digests (hardened)
- Registration acknowledgement text
- Admin check against the legacy or configured password
- Digest and constant-time comparison helpers
"""

import hashlib

import pytest
from pydantic import SecretStr

from api.src.services.credential_service import (
    ADMIN_DENIED,
    ADMIN_GRANTED,
    AdminGate,
    FaithfulCredentialHasher,
    HardenedCredentialHasher,
    build_credential_hasher,
    registration_message,
)
from shared.models.common import StrategyMode
from shared.security import digest_length, hash_data, secure_compare


# ============================================================================
# DIGEST HELPERS
# ============================================================================


class TestDigestHelpers:
    """Test shared digest helpers."""

    @pytest.mark.parametrize("algorithm", ["md5", "sha1", "sha256", "sha512"])
    def test_hash_data_matches_hashlib(self, algorithm):
        expected = hashlib.new(algorithm, b"payload").hexdigest()

        assert hash_data("payload", algorithm=algorithm) == expected
        assert hash_data(b"payload", algorithm=algorithm) == expected

    def test_unsupported_algorithm(self):
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            hash_data("payload", algorithm="whirlpool")

    def test_digest_length(self):
        assert digest_length("md5") == 32
        assert digest_length("sha256") == 64

    def test_secure_compare(self):
        assert secure_compare("secret", "secret")
        assert secure_compare(b"secret", "secret")
        assert not secure_compare("secret", "Secret")
        assert not secure_compare("", "secret")


# ============================================================================
# PASSWORD HASHING
# ============================================================================


class TestFaithfulCredentialHasher:
    """Test the unsalted MD5 hasher."""

    def test_md5_hex_digest(self):
        hasher = FaithfulCredentialHasher()

        assert hasher.hash_password("secret") == hashlib.md5(b"secret").hexdigest()

    def test_deterministic_and_fixed_length(self):
        """Same input gives the same 32-character digest, empty input included."""
        hasher = FaithfulCredentialHasher()

        for password in ("", "a", "x" * 10_000):
            first = hasher.hash_password(password)
            assert first == hasher.hash_password(password)
            assert len(first) == hasher.digest_length == 32

    def test_empty_password_digest(self):
        assert FaithfulCredentialHasher().hash_password("") == "d41d8cd98f00b204e9800998ecf8427e"

    def test_verify(self):
        hasher = FaithfulCredentialHasher()
        hashed = hasher.hash_password("secret")

        assert hasher.verify_password("secret", hashed)
        assert not hasher.verify_password("Secret", hashed)


class TestHardenedCredentialHasher:
    """Test the bcrypt hasher."""

    @pytest.fixture
    def hasher(self):
        return HardenedCredentialHasher(rounds=4)

    def test_bcrypt_format(self, hasher):
        hashed = hasher.hash_password("secret")

        assert hashed.startswith("$2b$04$")
        assert len(hashed) == 60

    def test_salted(self, hasher):
        """Two digests of the same password differ."""
        assert hasher.hash_password("secret") != hasher.hash_password("secret")

    def test_verify(self, hasher):
        hashed = hasher.hash_password("secret")

        assert hasher.verify_password("secret", hashed)
        assert not hasher.verify_password("wrong", hashed)

    def test_verify_malformed_hash(self, hasher):
        assert not hasher.verify_password("secret", "not-a-hash")


class TestRegistration:
    """Test the registration acknowledgement."""

    def test_faithful_message(self):
        message = registration_message(FaithfulCredentialHasher(), "alice", "secret")

        assert message == f"User registered with hash: {hashlib.md5(b'secret').hexdigest()}"

    def test_factory_selects_variant(self):
        assert isinstance(build_credential_hasher(StrategyMode.FAITHFUL), FaithfulCredentialHasher)
        assert isinstance(
            build_credential_hasher(StrategyMode.HARDENED, bcrypt_rounds=4),
            HardenedCredentialHasher,
        )


# ============================================================================
# ADMIN CHECK
# ============================================================================


class TestAdminGate:
    """Test the admin password check."""

    def test_faithful_legacy_password(self):
        gate = AdminGate(StrategyMode.FAITHFUL)

        assert gate.describe("admin123") == ADMIN_GRANTED
        assert gate.describe("admin1234") == ADMIN_DENIED
        assert gate.describe(None) == ADMIN_DENIED

    def test_faithful_ignores_configured_secret(self):
        gate = AdminGate(StrategyMode.FAITHFUL, SecretStr("configured"))

        assert gate.check("admin123")
        assert not gate.check("configured")

    def test_hardened_configured_password(self):
        gate = AdminGate(StrategyMode.HARDENED, SecretStr("configured"))

        assert gate.describe("configured") == ADMIN_GRANTED
        assert gate.describe("admin123") == ADMIN_DENIED

    @pytest.mark.parametrize("secret", [None, SecretStr("")])
    def test_hardened_without_secret_denies(self, secret):
        gate = AdminGate(StrategyMode.HARDENED, secret)

        assert not gate.check("admin123")
        assert not gate.check("")
