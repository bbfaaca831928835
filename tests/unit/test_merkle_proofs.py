"""
Merkle Proof Unit Tests
Tests for reserves/merkle/merkle_proofs.py

Covers:
1. Proof lookup - Found / NotFound, path layout, side flags
2. Round trip - every client verifies against the root
3. Tamper detection - modified balances, roots or siblings fail
4. Batch proofs - order, consistency with single proofs, all-or-nothing
"""
import pytest

from fixtures.clients import make_client_entry, make_client_list
from reserves.crypto.hashing import digest_hex
from reserves.merkle import (
    MerkleProver,
    MerkleVerifier,
    build_tree_from_leaves,
    compute_merkle_tree,
    fold_proof,
    hash_client_entry,
    merkle_parent,
    prove_all,
    prove_leaf,
    verify_proof,
)
from reserves.schemas.clients import ClientPath, Found, NotFound, SiblingPathEntry
from reserves.schemas.errors import FormatError, ProofNotFoundError, SerializationError


def _leaves(n: int) -> list[str]:
    return [digest_hex(f"leaf{i}".encode()) for i in range(n)]


class TestProveLeaf:
    """Tests for prove_leaf()."""

    def test_returns_found_with_entries(self, client_list, merkle_tree):
        leaf = hash_client_entry(client_list[0])

        result = prove_leaf(leaf, merkle_tree)

        assert isinstance(result, Found)
        assert result.index == 0
        assert all(isinstance(entry, SiblingPathEntry) for entry in result.proof)
        assert all(isinstance(entry.hash, str) for entry in result.proof)
        assert all(isinstance(entry.is_right, bool) for entry in result.proof)

    def test_missing_leaf_not_found(self, merkle_tree):
        result = prove_leaf("non-existing hash", merkle_tree)

        assert isinstance(result, NotFound)
        assert result.leaf_hash == "non-existing hash"

    def test_single_leaf_tree_empty_proof(self, single_client_list):
        tree = compute_merkle_tree(single_client_list)

        result = prove_leaf(tree[0][0], tree)

        assert isinstance(result, Found)
        assert result.proof == ()

    def test_four_leaf_layout(self):
        a, b, c, d = _leaves(4)
        tree = build_tree_from_leaves([a, b, c, d])
        ab = merkle_parent(a, b)
        cd = merkle_parent(c, d)

        assert prove_leaf(a, tree).proof == (
            SiblingPathEntry(hash=b, is_right=True),
            SiblingPathEntry(hash=cd, is_right=True),
        )
        assert prove_leaf(d, tree).proof == (
            SiblingPathEntry(hash=c, is_right=False),
            SiblingPathEntry(hash=ab, is_right=False),
        )

    def test_one_entry_per_level(self):
        tree = build_tree_from_leaves(_leaves(8))

        for leaf in tree.leaves:
            assert len(prove_leaf(leaf, tree).proof) == tree.depth - 1

    def test_unpaired_last_leaf_gets_self_sibling(self):
        a, b, c, d, e = _leaves(5)
        tree = build_tree_from_leaves([a, b, c, d, e])

        proof = prove_leaf(e, tree).proof

        assert proof[0] == SiblingPathEntry(hash=e, is_right=True)
        assert len(proof) == tree.depth - 1

    def test_skip_missing_siblings_literal_path(self):
        a, b, c, d, e = _leaves(5)
        tree = build_tree_from_leaves([a, b, c, d, e])
        ee = merkle_parent(e, e)
        abcd = merkle_parent(merkle_parent(a, b), merkle_parent(c, d))

        proof = prove_leaf(e, tree, skip_missing_siblings=True).proof

        assert proof == (
            SiblingPathEntry(hash=ee, is_right=True),
            SiblingPathEntry(hash=abcd, is_right=False),
        )

    def test_duplicate_leaf_proves_first_occurrence(self):
        entry = make_client_entry("Client 1")
        tree = compute_merkle_tree([entry, make_client_entry("Client 2"), entry])

        result = prove_leaf(hash_client_entry(entry), tree)

        assert result.index == 0


class TestVerifyProof:
    """Tests for verify_proof()."""

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 6, 7, 9, 16, 33])
    def test_every_client_round_trips(self, n):
        clients = make_client_list(n)
        tree = compute_merkle_tree(clients)

        for entry in clients:
            result = prove_leaf(hash_client_entry(entry), tree)
            assert verify_proof(entry, tree.root, result.proof)

    def test_single_client_verifies_with_empty_proof(self, single_client_list):
        tree = compute_merkle_tree(single_client_list)

        assert verify_proof(single_client_list[0], tree.root, [])

    def test_wrong_root_fails(self, client_list, merkle_tree):
        proof = prove_leaf(merkle_tree[0][1], merkle_tree).proof

        assert not verify_proof(client_list[1], "wrong root", proof)
        assert not verify_proof(client_list[1], digest_hex(b"another root"), proof)

    def test_tampered_balance_fails(self, client_list, merkle_tree):
        proof = prove_leaf(merkle_tree[0][2], merkle_tree).proof
        (client_id, balances), = client_list[2].items()
        token, amount = balances[0]
        tampered = {client_id: [(token, amount + 1)] + list(balances[1:])}

        assert verify_proof(client_list[2], merkle_tree.root, proof)
        assert not verify_proof(tampered, merkle_tree.root, proof)

    def test_renamed_client_fails(self, client_list, merkle_tree):
        proof = prove_leaf(merkle_tree[0][0], merkle_tree).proof
        (_, balances), = client_list[0].items()

        assert not verify_proof({"Client 999": balances}, merkle_tree.root, proof)

    def test_tampered_sibling_fails(self, client_list, merkle_tree):
        proof = list(prove_leaf(merkle_tree[0][0], merkle_tree).proof)
        proof[1] = SiblingPathEntry(hash=digest_hex(b"evil"), is_right=proof[1].is_right)

        assert not verify_proof(client_list[0], merkle_tree.root, proof)

    def test_flipped_side_fails(self, client_list, merkle_tree):
        proof = list(prove_leaf(merkle_tree[0][0], merkle_tree).proof)
        proof[0] = SiblingPathEntry(hash=proof[0].hash, is_right=not proof[0].is_right)

        assert not verify_proof(client_list[0], merkle_tree.root, proof)

    def test_accepts_plain_mappings(self, client_list, merkle_tree):
        proof = prove_leaf(merkle_tree[0][3], merkle_tree).proof
        as_alias = [entry.to_dict() for entry in proof]
        as_names = [{"hash": entry.hash, "is_right": entry.is_right} for entry in proof]

        assert verify_proof(client_list[3], merkle_tree.root, as_alias)
        assert verify_proof(client_list[3], merkle_tree.root, as_names)

    def test_malformed_proof_entry(self, client_list, merkle_tree):
        with pytest.raises(FormatError):
            verify_proof(client_list[0], merkle_tree.root, [{"hash": "ab"}])

    def test_unserializable_entry(self, merkle_tree):
        circular: dict = {}
        circular["self"] = circular

        with pytest.raises(SerializationError):
            verify_proof(circular, merkle_tree.root, [])

    def test_algorithm_must_match(self):
        clients = make_client_list(4)
        tree = compute_merkle_tree(clients, algorithm="sha512")
        proof = prove_leaf(tree[0][0], tree).proof

        assert verify_proof(clients[0], tree.root, proof, algorithm="SHA-512")
        assert not verify_proof(clients[0], tree.root, proof)

    def test_skipped_sibling_breaks_last_odd_leaf(self):
        clients = make_client_list(5)
        tree = compute_merkle_tree(clients)
        proof = prove_leaf(tree[0][4], tree, skip_missing_siblings=True).proof

        assert not verify_proof(clients[4], tree.root, proof)

    def test_fold_proof_empty(self):
        assert fold_proof("abc", []) == "abc"


class TestProveAll:
    """Tests for prove_all()."""

    def test_one_path_per_client_in_order(self, client_list, merkle_tree):
        paths = prove_all(client_list, merkle_tree)

        assert [p.client_id for p in paths] == [f"Client {i}" for i in range(1, 6)]
        assert all(isinstance(p, ClientPath) for p in paths)

    def test_consistent_with_single_proofs(self, client_list, merkle_tree):
        paths = prove_all(client_list, merkle_tree)

        for i, path in enumerate(paths):
            assert path.proof == prove_leaf(merkle_tree[0][i], merkle_tree).proof

    def test_every_path_verifies(self):
        clients = make_client_list(21)
        tree = compute_merkle_tree(clients)

        for entry, path in zip(clients, prove_all(clients, tree)):
            assert verify_proof(entry, tree.root, path.proof)

    def test_duplicate_client_ids_kept(self):
        clients = [make_client_entry("Client 1", [("Token 1", i)]) for i in range(3)]
        tree = compute_merkle_tree(clients)

        paths = prove_all(clients, tree)

        assert [p.client_id for p in paths] == ["Client 1"] * 3

    def test_single_client(self, single_client_list):
        tree = compute_merkle_tree(single_client_list)

        paths = prove_all(single_client_list, tree)

        assert paths == [ClientPath(client_id="Client 1", proof=())]

    def test_client_list_longer_than_tree(self, client_list, merkle_tree):
        extra = client_list + [make_client_entry("Client 6")]

        with pytest.raises(ProofNotFoundError, match="Client 6") as exc_info:
            prove_all(extra, merkle_tree)

        assert exc_info.value.details["index"] == 5

    def test_malformed_entry(self, merkle_tree):
        with pytest.raises(FormatError):
            prove_all([{"a": [], "b": []}], merkle_tree)

    def test_to_dict_shape(self, client_list, merkle_tree):
        path = prove_all(client_list, merkle_tree)[0]

        (client_id, proof), = path.to_dict().items()

        assert client_id == "Client 1"
        assert set(proof[0]) == {"hash", "isRight"}


class TestConvenienceClasses:
    """Tests for MerkleProver and MerkleVerifier."""

    def test_prover_round_trip(self):
        clients = make_client_list(6)
        prover = MerkleProver(algorithm="sha3-256")
        verifier = MerkleVerifier(algorithm="sha3-256")

        tree = prover.build(clients)
        paths = prover.prove_all(clients, tree)

        assert tree.algorithm == "sha3_256"
        for entry, path in zip(clients, paths):
            assert verifier.verify_path(entry, tree.root, path)

    def test_prove_entry(self, client_list):
        prover = MerkleProver()
        tree = prover.build(client_list)

        assert prover.prove_entry(client_list[3], tree).index == 3
        assert isinstance(prover.prove_entry(make_client_entry("Nobody"), tree), NotFound)

    def test_verify_path_rejects_other_client(self, client_list, merkle_tree):
        paths = prove_all(client_list, merkle_tree)

        assert not MerkleVerifier().verify_path(client_list[0], merkle_tree.root, paths[1])

    def test_from_config(self):
        from reserves.config.runtime import MerkleConfig

        prover = MerkleProver.from_config(MerkleConfig(algorithm="SHA-384", workers=2))

        assert prover.algorithm == "sha384"
        assert prover.workers == 2
