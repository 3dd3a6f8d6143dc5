"""Digest and comparison helpers.

Provides plain message digests and constant-time comparison.
"""

import hashlib
import hmac
from typing import Union

SUPPORTED_DIGESTS = ("md5", "sha1", "sha256", "sha512")


def hash_data(data: Union[str, bytes], algorithm: str = "sha256") -> str:
    """Hash data using specified algorithm.

    A single unsalted round; the output depends on the input only.

    Args:
        data: Data to hash
        algorithm: Hash algorithm (md5, sha1, sha256, sha512)

    Returns:
        Hexadecimal hash string

    Raises:
        ValueError: If the algorithm is not supported
    """
    if isinstance(data, str):
        data = data.encode()

    if algorithm not in SUPPORTED_DIGESTS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    hasher = hashlib.new(algorithm)
    hasher.update(data)
    return hasher.hexdigest()


def digest_length(algorithm: str) -> int:
    """Return the hex length of digests produced by ``algorithm``."""
    if algorithm not in SUPPORTED_DIGESTS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return hashlib.new(algorithm).digest_size * 2


def secure_compare(provided: Union[str, bytes], expected: Union[str, bytes]) -> bool:
    """Compare two secrets in constant time.

    Args:
        provided: Value supplied by the caller
        expected: Value it must match

    Returns:
        True if both values are equal, False otherwise
    """
    if isinstance(provided, str):
        provided = provided.encode()

    if isinstance(expected, str):
        expected = expected.encode()

    return hmac.compare_digest(provided, expected)
