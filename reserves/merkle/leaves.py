"""
Leaf Hashing
Turns a client list into the ordered leaf level of a Merkle tree.

Rule: leaf = digest(dumps_canonical(entry).encode("utf-8"))

The whole client list is validated before the first digest is computed,
so a malformed entry never yields partial output.
"""
from __future__ import annotations

import concurrent.futures
import logging
from typing import Any, Callable, Sequence, TypeVar

from reserves.crypto.hashing import DEFAULT_ALGORITHM, hash_canonical, normalize_algorithm
from reserves.schemas.clients import ClientEntry, validate_client_list


logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_R = TypeVar("_R")


def map_in_order(func: Callable[[_T], _R], items: Sequence[_T], workers: int = 1) -> list[_R]:
    """
    Apply func to every item, keeping input order in the result.

    With workers > 1 the calls run on a thread pool. Executor.map yields
    results in submission order, so positions never shift.
    """
    if workers <= 1 or len(items) < 2:
        return [func(item) for item in items]
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(func, items))


def hash_client_entry(entry: Any, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Hash one client entry without shape validation.

    Raises:
        SerializationError: If the entry cannot be canonically serialized.
    """
    return hash_canonical(entry, algorithm)


def hash_list(
    client_list: Sequence[ClientEntry],
    algorithm: str = DEFAULT_ALGORITHM,
    validate_records: bool = True,
    workers: int = 1,
) -> list[str]:
    """
    Produce the leaf hashes of a client list.

    Args:
        client_list: Ordered client entries
        algorithm: Digest algorithm identifier
        validate_records: Also check every balance record's shape
        workers: Thread pool size for hashing (1 = sequential)

    Returns:
        Hex leaf hashes, same length and order as client_list

    Raises:
        FormatError: If any entry is malformed (raised before hashing)
        SerializationError: If an entry cannot be canonicalized
        UnsupportedAlgorithmError: If the algorithm is unknown
    """
    validate_client_list(client_list, validate_records=validate_records)
    name = normalize_algorithm(algorithm)

    leaves = map_in_order(lambda entry: hash_canonical(entry, name), list(client_list), workers)
    logger.debug("Hashed %d client entries with %s", len(leaves), name)
    return leaves


__all__ = [
    "hash_client_entry",
    "hash_list",
    "map_in_order",
]
