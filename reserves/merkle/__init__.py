"""
Merkle Tree and Inclusion Proofs
Balance-record commitments: leaf hashing, tree construction, proofs.

This package provides:
- hash_list: Leaf hashes of a client list
- compute_merkle_tree: Full tree of levels, leaves to root
- prove_leaf / prove_all: Sibling paths for one leaf or every client
- verify_proof: Check a client entry against a published root

Commitment Rules:
1. Leaf hashing: digest(dumps_canonical(entry).encode("utf-8"))
2. Parent hashing: digest(left_hex + right_hex)
3. Padding: unpaired last node is paired with itself; a new odd-width
   level above a level wider than two gets its last node duplicated
4. Empty client list: EmptyInputError
5. Single leaf: root = leaf, proof = ()

Usage:
    from reserves.merkle import compute_merkle_tree, prove_all, verify_proof

    tree = compute_merkle_tree(clients)
    paths = prove_all(clients, tree)
    assert verify_proof(clients[0], tree.root, paths[0].proof)
"""
from .leaves import (
    hash_client_entry,
    hash_list,
)

from .merkle_tree import (
    MerkleTree,
    merkle_parent,
    build_tree_from_leaves,
    compute_merkle_tree,
    compute_tree_depth,
)

from .merkle_proofs import (
    prove_leaf,
    prove_all,
    fold_proof,
    verify_proof,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Leaves
    "hash_client_entry",
    "hash_list",
    # Tree
    "MerkleTree",
    "merkle_parent",
    "build_tree_from_leaves",
    "compute_merkle_tree",
    "compute_tree_depth",
    # Proofs
    "prove_leaf",
    "prove_all",
    "fold_proof",
    "verify_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
