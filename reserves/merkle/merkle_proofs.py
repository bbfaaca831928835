"""
Merkle Proofs
Inclusion proof generation (single leaf and batch) and verification.

This module provides:
- prove_leaf: sibling path for one leaf hash, as a Found / NotFound result
- prove_all: sibling path for every client, all-or-nothing
- verify_proof: recompute the root from a client entry and its proof
- MerkleProver / MerkleVerifier: class-based wrappers

Proof layout: one SiblingPathEntry per level climbed, leaf level first.
is_right=True means parent = digest(node + sibling), otherwise
parent = digest(sibling + node).
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from reserves.crypto.hashing import DEFAULT_ALGORITHM, normalize_algorithm
from reserves.merkle.leaves import hash_client_entry
from reserves.merkle.merkle_tree import MerkleTree, compute_merkle_tree, merkle_parent
from reserves.schemas.clients import (
    ClientEntry,
    ClientPath,
    Found,
    NotFound,
    ProofLookup,
    SiblingPathEntry,
    client_id_of,
    validate_client_entry,
)
from reserves.schemas.errors import ProofNotFoundError


logger = logging.getLogger(__name__)


def _proof_at(index: int, tree: MerkleTree, skip_missing_siblings: bool) -> tuple[SiblingPathEntry, ...]:
    proof: list[SiblingPathEntry] = []

    for level in tree.levels[:-1]:
        is_even = index % 2 == 0
        sibling_index = index + 1 if is_even else index - 1

        if 0 <= sibling_index < len(level):
            proof.append(SiblingPathEntry(hash=level[sibling_index], is_right=is_even))
        elif not skip_missing_siblings:
            # Unpaired last node: the builder hashed it with itself
            proof.append(SiblingPathEntry(hash=level[index], is_right=True))

        index //= 2

    return tuple(proof)


def prove_leaf(
    leaf_hash: str,
    tree: MerkleTree,
    skip_missing_siblings: bool = False,
) -> ProofLookup:
    """
    Collect the sibling path from a leaf to the root.

    The first occurrence of leaf_hash in level 0 is proven.

    When the node at some level has no partner (only possible for the last
    leaf of an odd-width leaf level), the default is to append the node
    itself as a right sibling, mirroring how the builder paired it. This
    departs from a plain sibling walk, which appends nothing there and
    produces a proof that cannot fold back to the root. Pass
    skip_missing_siblings=True for the plain walk.

    Args:
        leaf_hash: Hex hash of the leaf to prove
        tree: Tree produced by compute_merkle_tree
        skip_missing_siblings: Append nothing for a level where the node
            has no partner, instead of a self-sibling entry. Proofs built
            this way do not verify for the last leaf of an odd-width
            leaf level.

    Returns:
        Found(proof, index) or NotFound(leaf_hash). A single-leaf tree
        yields Found with an empty proof.
    """
    try:
        index = tree.leaves.index(leaf_hash)
    except ValueError:
        return NotFound(leaf_hash=leaf_hash)

    return Found(proof=_proof_at(index, tree, skip_missing_siblings), index=index)


def prove_all(
    client_list: Sequence[ClientEntry],
    tree: MerkleTree,
    skip_missing_siblings: bool = False,
) -> list[ClientPath]:
    """
    Build a proof for every client, in client list order.

    The i-th client is proven with the tree's i-th leaf hash; entries
    are not re-hashed.

    Raises:
        FormatError: If an entry is malformed
        ProofNotFoundError: If any client's leaf cannot be located
    """
    paths: list[ClientPath] = []
    leaves = tree.leaves

    for i, entry in enumerate(client_list):
        client_id = validate_client_entry(entry, index=i, validate_records=False)
        lookup: ProofLookup = (
            prove_leaf(leaves[i], tree, skip_missing_siblings)
            if i < len(leaves)
            else NotFound(leaf_hash="")
        )
        if not isinstance(lookup, Found):
            raise ProofNotFoundError(client_id, index=i)
        paths.append(ClientPath(client_id=client_id, proof=lookup.proof))

    logger.debug("Generated %d client proofs", len(paths))
    return paths


def fold_proof(
    leaf_hash: str,
    proof: Iterable[Any],
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """
    Recompute the root implied by a leaf hash and its sibling path.

    Raises:
        FormatError: If a proof entry is malformed
    """
    name = normalize_algorithm(algorithm)
    computed = leaf_hash

    for position, raw in enumerate(proof):
        entry = SiblingPathEntry.parse(raw, position)
        if entry.is_right:
            computed = merkle_parent(computed, entry.hash, name)
        else:
            computed = merkle_parent(entry.hash, computed, name)

    return computed


def verify_proof(
    client_entry: Any,
    claimed_root: str,
    proof: Iterable[Any],
    algorithm: str = DEFAULT_ALGORITHM,
) -> bool:
    """
    Verify that a client entry is included under a claimed root.

    Args:
        client_entry: The raw client entry (re-hashed here)
        claimed_root: Published root hash
        proof: SiblingPathEntry values or {"hash", "is_right"/"isRight"} mappings
        algorithm: Digest algorithm the tree was built with

    Returns:
        True if the recomputed root equals claimed_root, False otherwise

    Raises:
        SerializationError: If the entry cannot be canonicalized
        FormatError: If a proof entry is malformed
    """
    leaf_hash = hash_client_entry(client_entry, algorithm)
    return fold_proof(leaf_hash, proof, algorithm) == claimed_root


class MerkleProver:
    """
    Convenience class for building trees and proofs with fixed settings.

    Example:
        >>> prover = MerkleProver(algorithm="sha256")
        >>> tree = prover.build(clients)
        >>> paths = prover.prove_all(clients, tree)
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        validate_records: bool = True,
        workers: int = 1,
        skip_missing_siblings: bool = False,
    ) -> None:
        self.algorithm = normalize_algorithm(algorithm)
        self.validate_records = validate_records
        self.workers = workers
        self.skip_missing_siblings = skip_missing_siblings

    @classmethod
    def from_config(cls, config: Any) -> "MerkleProver":
        """Create a prover from a MerkleConfig."""
        return cls(
            algorithm=config.algorithm,
            validate_records=config.validate_records,
            workers=config.workers,
            skip_missing_siblings=config.skip_missing_siblings,
        )

    def build(self, client_list: Sequence[ClientEntry]) -> MerkleTree:
        return compute_merkle_tree(
            client_list,
            algorithm=self.algorithm,
            validate_records=self.validate_records,
            workers=self.workers,
        )

    def prove(self, leaf_hash: str, tree: MerkleTree) -> ProofLookup:
        return prove_leaf(leaf_hash, tree, self.skip_missing_siblings)

    def prove_entry(self, client_entry: ClientEntry, tree: MerkleTree) -> ProofLookup:
        """Hash a client entry and look up its proof."""
        return self.prove(hash_client_entry(client_entry, self.algorithm), tree)

    def prove_all(self, client_list: Sequence[ClientEntry], tree: MerkleTree) -> list[ClientPath]:
        return prove_all(client_list, tree, self.skip_missing_siblings)


class MerkleVerifier:
    """Convenience class for verifying proofs against a published root."""

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self.algorithm = normalize_algorithm(algorithm)

    def verify(self, client_entry: Any, claimed_root: str, proof: Iterable[Any]) -> bool:
        return verify_proof(client_entry, claimed_root, proof, self.algorithm)

    def verify_path(self, client_entry: ClientEntry, claimed_root: str, path: ClientPath) -> bool:
        """Verify a ClientPath, checking it belongs to this client first."""
        if client_id_of(client_entry) != path.client_id:
            return False
        return self.verify(client_entry, claimed_root, path.proof)


__all__ = [
    "prove_leaf",
    "prove_all",
    "fold_proof",
    "verify_proof",
    "MerkleProver",
    "MerkleVerifier",
]
