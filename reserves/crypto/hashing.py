"""
Hashing Utilities
Configurable digest primitive used for both leaves and internal nodes.

This module provides:
- Algorithm name normalization and validation
- Hex digests of raw bytes
- Canonical hashing of client entries (via dumps_canonical)
- Parent hashing over concatenated hex digests

Security/Determinism Notes:
- Hex digests are lowercase
- Parent hashing concatenates the two hex strings, never the raw digests
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
from typing import Any

from reserves.schemas.canonical import encode_canonical
from reserves.schemas.errors import UnsupportedAlgorithmError


DEFAULT_ALGORITHM = "sha256"

SUPPORTED_ALGORITHMS: frozenset[str] = frozenset(
    {
        "sha1",
        "sha256",
        "sha384",
        "sha512",
        "sha3_256",
        "sha3_384",
        "sha3_512",
        "blake2b",
        "blake2s",
    }
) & hashlib.algorithms_guaranteed


def normalize_algorithm(algorithm: str) -> str:
    """
    Map an algorithm identifier to its hashlib name.

    Accepts hashlib names ("sha256") as well as WebCrypto style
    names ("SHA-256", "sha3-256").

    Raises:
        UnsupportedAlgorithmError: If the algorithm is not supported.

    Example:
        >>> normalize_algorithm("SHA-256")
        'sha256'
    """
    if not isinstance(algorithm, str):
        raise UnsupportedAlgorithmError(repr(algorithm), sorted(SUPPORTED_ALGORITHMS))

    name = algorithm.strip().lower()
    if name.startswith("sha3"):
        name = name.replace("-", "_")
    else:
        name = name.replace("-", "").replace("_", "")

    if name not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithmError(algorithm, sorted(SUPPORTED_ALGORITHMS))
    return name


def digest_hex(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Compute the hex digest of raw bytes.

    Example:
        >>> digest_hex(b"hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.new(normalize_algorithm(algorithm), data).hexdigest()


def hash_canonical(obj: Any, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Hash an object using canonical JSON serialization.

    This is how a client entry becomes a leaf:
    leaf = digest(dumps_canonical(entry).encode("utf-8"))

    Raises:
        SerializationError: If the object cannot be canonically serialized.
        UnsupportedAlgorithmError: If the algorithm is not supported.
    """
    name = normalize_algorithm(algorithm)
    return hashlib.new(name, encode_canonical(obj)).hexdigest()


def hash_concat(left: str, right: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Hash the concatenation of two hex digests.

    parent = digest((left + right).encode("utf-8"))

    The order is fixed by the caller and never normalized.
    """
    return digest_hex((left + right).encode("utf-8"), algorithm)


__all__ = [
    "DEFAULT_ALGORITHM",
    "SUPPORTED_ALGORITHMS",
    "normalize_algorithm",
    "digest_hex",
    "hash_canonical",
    "hash_concat",
]
