"""Security helpers for hashing and secret comparison."""

from .crypto import SUPPORTED_DIGESTS, digest_length, hash_data, secure_compare

__all__ = [
    "SUPPORTED_DIGESTS",
    "digest_length",
    "hash_data",
    "secure_compare",
]
