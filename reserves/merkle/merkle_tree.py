"""
Merkle Tree Construction
Deterministic, fully materialized Merkle tree over client leaf hashes.

This module provides:
- MerkleTree: immutable sequence of levels, leaves first, root last
- merkle_parent: the node-combine step
- compute_merkle_tree: client list -> tree
- build_tree_from_leaves: leaf hashes -> tree
- compute_tree_depth: expected number of levels for N leaves

Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = digest(dumps_canonical(entry).encode("utf-8"))
2. Parent hashing: parent = digest(left_hex + right_hex)
3. Pairing: an unpaired last node is paired with itself
4. Secondary padding: if a new level has odd width and the level below it
   was wider than 2, its last node is duplicated once more
5. Empty client list: EmptyInputError
6. Single leaf: the tree is one level and the root is the leaf

Determinism Notes:
- Leaf ordering is defined by the client list and never sorted
- Pair order is always left + right
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

from reserves.crypto.hashing import DEFAULT_ALGORITHM, hash_concat, normalize_algorithm
from reserves.merkle.leaves import hash_list, map_in_order
from reserves.schemas.clients import ClientEntry, Level
from reserves.schemas.errors import EmptyInputError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleTree:
    """
    A fully materialized Merkle tree.

    Attributes:
        levels: Tuple of levels; levels[0] are the leaf hashes in client
                list order and levels[-1] holds exactly one hash, the root
        algorithm: hashlib name of the digest used for every node
    """
    levels: tuple[Level, ...]
    algorithm: str = DEFAULT_ALGORITHM

    def __post_init__(self) -> None:
        """Validate tree structure."""
        if not self.levels or not self.levels[0]:
            raise EmptyInputError("Merkle tree must have at least one leaf")
        if len(self.levels[-1]) != 1:
            raise ValueError(
                f"Top level must hold exactly one hash, got {len(self.levels[-1])}"
            )

    @property
    def root(self) -> str:
        return self.levels[-1][0]

    @property
    def depth(self) -> int:
        """Number of levels, leaves and root included."""
        return len(self.levels)

    @property
    def leaves(self) -> Level:
        return self.levels[0]

    def __len__(self) -> int:
        return len(self.levels)

    def __getitem__(self, index: int) -> Level:
        return self.levels[index]

    def __iter__(self) -> Iterator[Level]:
        return iter(self.levels)

    def to_list(self) -> list[list[str]]:
        """Plain nested lists, e.g. for JSON output."""
        return [list(level) for level in self.levels]


def merkle_parent(left: str, right: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Compute the parent hash of two child nodes.

    Parent hash is digest(left + right) over the hex strings.
    """
    return hash_concat(left, right, algorithm)


def _next_level(hashes: Sequence[str], algorithm: str, workers: int) -> list[str]:
    pairs = [
        (hashes[i], hashes[i + 1] if i + 1 < len(hashes) else hashes[i])
        for i in range(0, len(hashes), 2)
    ]
    return map_in_order(lambda pair: merkle_parent(pair[0], pair[1], algorithm), pairs, workers)


def build_tree_from_leaves(
    leaves: Sequence[str],
    algorithm: str = DEFAULT_ALGORITHM,
    workers: int = 1,
) -> MerkleTree:
    """
    Fold leaf hashes bottom-up into a full tree.

    Example with five leaves [a, b, c, d, e]:
        Level 0: [a, b, c, d, e]
        Level 1: [ab, cd, ee]        -> padded to [ab, cd, ee, ee]
        Level 2: [abcd, eeee]
        Level 3: [root]

    Args:
        leaves: Leaf hashes in client list order
        algorithm: Digest algorithm identifier
        workers: Thread pool size for hashing one level (1 = sequential)

    Raises:
        EmptyInputError: If leaves is empty
    """
    if len(leaves) == 0:
        raise EmptyInputError("Empty array of hashes.")

    name = normalize_algorithm(algorithm)
    hashes: list[str] = list(leaves)
    levels: list[Level] = [tuple(hashes)]

    while len(hashes) > 1:
        next_level = _next_level(hashes, name, workers)

        # Keep widths even above any level wider than two nodes
        if len(next_level) % 2 != 0 and len(hashes) > 2:
            next_level.append(next_level[-1])
            logger.debug("Padded level %d to %d nodes", len(levels), len(next_level))

        hashes = next_level
        levels.append(tuple(hashes))

    logger.debug(
        "Built Merkle tree: %d leaves, depth %d, root %s",
        len(leaves), len(levels), levels[-1][0],
    )
    return MerkleTree(levels=tuple(levels), algorithm=name)


def compute_merkle_tree(
    client_list: Sequence[ClientEntry],
    algorithm: str = DEFAULT_ALGORITHM,
    validate_records: bool = True,
    workers: int = 1,
) -> MerkleTree:
    """
    Build the Merkle tree of a client list.

    Args:
        client_list: Ordered, non-empty client entries
        algorithm: Digest algorithm identifier, used for leaves and nodes
        validate_records: Also check every balance record's shape
        workers: Thread pool size for hashing (1 = sequential)

    Returns:
        MerkleTree whose level 0 matches the client list order

    Raises:
        EmptyInputError: If client_list is empty
        FormatError: If any entry is malformed
        SerializationError: If an entry cannot be canonicalized
    """
    if len(client_list) == 0:
        raise EmptyInputError("Empty array of clients.")

    leaves = hash_list(
        client_list,
        algorithm=algorithm,
        validate_records=validate_records,
        workers=workers,
    )
    return build_tree_from_leaves(leaves, algorithm=algorithm, workers=workers)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a tree with the given number of leaves.

    Depth is the number of levels from leaves to root (inclusive) and
    follows the same pairing and padding rules as build_tree_from_leaves.

    Returns:
        Tree depth (0 for empty tree)
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        parents = (n + 1) // 2
        if parents % 2 == 1 and n > 2:
            parents += 1
        n = parents
        depth += 1

    return depth


__all__ = [
    "MerkleTree",
    "merkle_parent",
    "build_tree_from_leaves",
    "compute_merkle_tree",
    "compute_tree_depth",
]
