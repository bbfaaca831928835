"""
Cryptographic utilities.

Provides the configurable digest used for leaves and internal nodes.
"""
from .hashing import (
    DEFAULT_ALGORITHM,
    SUPPORTED_ALGORITHMS,
    normalize_algorithm,
    digest_hex,
    hash_canonical,
    hash_concat,
)

__all__ = [
    "DEFAULT_ALGORITHM",
    "SUPPORTED_ALGORITHMS",
    "normalize_algorithm",
    "digest_hex",
    "hash_canonical",
    "hash_concat",
]
