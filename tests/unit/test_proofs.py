"""
Module 02 - Inclusion Proof Unit Tests
Tests for MerkleMountainRange.get_merkle_proof and mmr_core/merkle/proofs.py

Covers:
1. Proof verification - every leaf of many widths verifies
2. Ten-leaf scenario - leaf 17 under the second peak, value d10
3. Tamper detection - value, sibling, peak, root, width, index
4. Proof construction errors - internal nodes, out-of-range indexes
5. Check reporting - explain_inclusion names the failing step
6. Serialization - to_dict / from_dict
"""
import pytest

from fixtures import make_digest, make_digests, make_tree

from mmr_core.config.runtime import HasherConfig, RuntimeConfig, set_default_config
from mmr_core.crypto.field import Blake2bFieldHasher
from mmr_core.crypto.hashing import ZERO_HASH, to_hex
from mmr_core.merkle.indexing import get_leaf_index
from mmr_core.merkle.mountain_range import MerkleMountainRange
from mmr_core.merkle.proofs import (
    MerkleProof,
    explain_inclusion,
    verify_inclusion,
    verify_proof,
)
from mmr_core.schemas.errors import (
    IndexOutOfRangeException,
    NotALeafException,
)


def _flip(data: bytes) -> bytes:
    """Change the last byte while staying inside the field."""
    return data[:-1] + bytes([data[-1] ^ 1])


class TestProofVerification:
    """Every leaf proves against the current root."""

    @pytest.mark.parametrize("width", [1, 2, 3, 7, 8, 10, 16, 31, 33])
    def test_every_leaf_verifies(self, width, hasher):
        tree = make_tree(width, hasher)
        for n in range(1, width + 1):
            leaf_index = get_leaf_index(n)
            proof = tree.get_merkle_proof(leaf_index)
            assert verify_proof(proof, make_digest(n), hasher), (width, leaf_index)

    def test_old_proof_fails_after_append(self, hasher):
        tree = make_tree(5, hasher)
        proof = tree.get_merkle_proof(1)
        tree.append(make_digest(6))
        assert not verify_proof(proof, make_digest(1), hasher)
        assert verify_proof(tree.get_merkle_proof(1), make_digest(1), hasher)

    def test_single_leaf_proof_has_no_siblings(self, hasher):
        tree = make_tree(1, hasher)
        proof = tree.get_merkle_proof(1)
        assert proof.siblings == []
        assert proof.peak_bag == tree.get_peaks()
        assert verify_proof(proof, make_digest(1), hasher)

    def test_verifier_uses_default_config_hasher(self):
        set_default_config(RuntimeConfig(hasher=HasherConfig(backend="blake2b")))
        tree = MerkleMountainRange()
        tree.extend(make_digests(3))
        assert isinstance(tree.hasher, Blake2bFieldHasher)
        assert verify_proof(tree.get_merkle_proof(4), make_digest(3))


class TestTenLeafScenario:
    """The ten-leaf worked example."""

    def test_leaf_17_proof(self, ten_leaf_tree, hasher):
        proof = ten_leaf_tree.get_merkle_proof(17)
        assert proof.width == 10
        assert proof.root == ten_leaf_tree.root
        assert proof.peak_bag == [ten_leaf_tree.get_node_hash(15), ten_leaf_tree.get_node_hash(18)]
        assert proof.siblings == [ten_leaf_tree.get_node_hash(16)]

    def test_leaf_17_verifies_for_d10_only(self, ten_leaf_tree, hasher):
        proof = ten_leaf_tree.get_merkle_proof(17)
        assert verify_proof(proof, make_digest(10), hasher)
        for n in range(1, 10):
            assert not verify_proof(proof, make_digest(n), hasher)

    def test_leaf_9_path(self, ten_leaf_tree):
        """Siblings run from the leaf level up: 8, then 13, then 7."""
        proof = ten_leaf_tree.get_merkle_proof(9)
        assert proof.siblings == [
            ten_leaf_tree.get_node_hash(8),
            ten_leaf_tree.get_node_hash(13),
            ten_leaf_tree.get_node_hash(7),
        ]

    def test_wrong_width_fails(self, ten_leaf_tree, hasher):
        proof = ten_leaf_tree.get_merkle_proof(17)
        for width in (9, 11):
            assert not verify_inclusion(
                proof.root, width, 17, make_digest(10), proof.peak_bag, proof.siblings, hasher
            )


class TestTamperDetection:
    """Tampered proofs fail verification."""

    @pytest.fixture
    def proof(self, ten_leaf_tree):
        return ten_leaf_tree.get_merkle_proof(9)

    def test_tampered_value(self, proof, hasher):
        assert not verify_proof(proof, make_digest(7), hasher)

    def test_every_value_byte_flip_fails(self, proof, hasher):
        value = make_digest(6)
        assert verify_proof(proof, value, hasher)
        for i in range(len(value)):
            tampered = value[:i] + bytes([value[i] ^ 1]) + value[i + 1:]
            assert not verify_proof(proof, tampered, hasher), f"byte {i}"

    def test_tampered_sibling(self, proof, hasher):
        for i in range(len(proof.siblings)):
            siblings = list(proof.siblings)
            siblings[i] = _flip(siblings[i])
            assert not verify_inclusion(
                proof.root, proof.width, 9, make_digest(6), proof.peak_bag, siblings, hasher
            )

    def test_tampered_peak(self, proof, hasher):
        peaks = [proof.peak_bag[0], _flip(proof.peak_bag[1])]
        assert not verify_inclusion(
            proof.root, proof.width, 9, make_digest(6), peaks, proof.siblings, hasher
        )

    def test_tampered_root(self, proof, hasher):
        assert not verify_inclusion(
            _flip(proof.root), proof.width, 9, make_digest(6), proof.peak_bag, proof.siblings, hasher
        )

    def test_wrong_leaf_index(self, proof, hasher):
        for leaf_index in (8, 11, 16):
            assert not verify_inclusion(
                proof.root, proof.width, leaf_index, make_digest(6),
                proof.peak_bag, proof.siblings, hasher,
            )

    def test_swapped_siblings(self, proof, hasher):
        siblings = list(reversed(proof.siblings))
        assert not verify_inclusion(
            proof.root, proof.width, 9, make_digest(6), proof.peak_bag, siblings, hasher
        )

    def test_wrong_backend(self, proof):
        assert not verify_proof(proof, make_digest(6), Blake2bFieldHasher())


class TestProofErrors:
    """Tests for invalid proof requests."""

    def test_internal_node_rejected(self, ten_leaf_tree):
        with pytest.raises(NotALeafException):
            ten_leaf_tree.get_merkle_proof(14)

    def test_index_past_size(self, ten_leaf_tree):
        with pytest.raises(IndexOutOfRangeException):
            ten_leaf_tree.get_merkle_proof(19)

    def test_index_zero(self, ten_leaf_tree):
        with pytest.raises(IndexOutOfRangeException):
            ten_leaf_tree.get_merkle_proof(0)

    def test_empty_tree(self, tree):
        with pytest.raises(IndexOutOfRangeException):
            tree.get_merkle_proof(1)


class TestExplainInclusion:
    """Tests for the per-step verification report."""

    def test_all_checks_pass(self, ten_leaf_tree, hasher, assert_check_passed):
        proof = ten_leaf_tree.get_merkle_proof(17)
        result = explain_inclusion(
            proof.root, 10, 17, make_digest(10), proof.peak_bag, proof.siblings, hasher
        )
        assert result.ok
        for check_id in (
            "size_bound", "leaf_position", "peak_bagging",
            "target_peak", "path_length", "peak_hash",
        ):
            assert_check_passed(result, check_id)

    def test_size_bound(self, ten_leaf_tree, hasher, assert_check_failed):
        proof = ten_leaf_tree.get_merkle_proof(17)
        result = explain_inclusion(
            proof.root, 10, 19, make_digest(10), proof.peak_bag, proof.siblings, hasher
        )
        assert not result.ok
        assert_check_failed(result, "size_bound")

    def test_internal_node(self, ten_leaf_tree, hasher, assert_check_failed):
        proof = ten_leaf_tree.get_merkle_proof(17)
        result = explain_inclusion(
            proof.root, 10, 18, make_digest(10), proof.peak_bag, proof.siblings, hasher
        )
        assert_check_failed(result, "leaf_position")

    def test_peak_count(self, ten_leaf_tree, hasher, assert_check_failed):
        proof = ten_leaf_tree.get_merkle_proof(17)
        result = explain_inclusion(
            proof.root, 10, 17, make_digest(10), proof.peak_bag[:1], proof.siblings, hasher
        )
        assert_check_failed(result, "peak_bagging")
        assert result.checks[-1].details["code"] == "PEAK_COUNT_MISMATCH"

    def test_path_length(self, ten_leaf_tree, hasher, assert_check_failed):
        proof = ten_leaf_tree.get_merkle_proof(17)
        result = explain_inclusion(
            proof.root, 10, 17, make_digest(10), proof.peak_bag, proof.siblings * 2, hasher
        )
        assert_check_failed(result, "path_length")

    def test_peak_hash(self, ten_leaf_tree, hasher, assert_check_failed):
        proof = ten_leaf_tree.get_merkle_proof(17)
        result = explain_inclusion(
            proof.root, 10, 17, make_digest(1), proof.peak_bag, proof.siblings, hasher
        )
        assert_check_failed(result, "peak_hash")
        assert result.get_error_messages()
        assert result.failed_check is result.checks[-1]

    def test_non_canonical_sibling(self, ten_leaf_tree, hasher, assert_check_failed):
        proof = ten_leaf_tree.get_merkle_proof(17)
        result = explain_inclusion(
            proof.root, 10, 17, make_digest(10), proof.peak_bag, [b"\xff" * 32], hasher
        )
        assert not result.ok
        assert_check_failed(result, "proof_format")
        assert result.error is not None

    def test_short_sibling(self, ten_leaf_tree, hasher):
        proof = ten_leaf_tree.get_merkle_proof(17)
        assert not verify_inclusion(
            proof.root, 10, 17, make_digest(10), proof.peak_bag, [b"\x00" * 8], hasher
        )

    def test_negative_width(self, hasher):
        assert not verify_inclusion(ZERO_HASH, -1, 1, make_digest(1), [], [], hasher)

    def test_zero_width(self, hasher):
        assert not verify_inclusion(ZERO_HASH, 0, 1, make_digest(1), [], [], hasher)


class TestProofSerialization:
    """Tests for MerkleProof.to_dict / from_dict."""

    def test_to_dict_hex(self, ten_leaf_tree):
        data = ten_leaf_tree.get_merkle_proof(17).to_dict()
        assert data["root"] == to_hex(ten_leaf_tree.root)
        assert data["width"] == 10
        assert data["leaf_index"] == 17
        assert len(data["peak_bag"]) == 2
        assert len(data["siblings"]) == 1

    def test_from_dict_verifies(self, ten_leaf_tree, hasher):
        data = ten_leaf_tree.get_merkle_proof(12).to_dict()
        proof = MerkleProof.from_dict(data)
        assert verify_proof(proof, make_digest(8), hasher)

    def test_from_dict_missing_field(self, ten_leaf_tree):
        data = ten_leaf_tree.get_merkle_proof(12).to_dict()
        del data["siblings"]
        with pytest.raises(KeyError):
            MerkleProof.from_dict(data)

    def test_invalid_width(self):
        with pytest.raises(ValueError, match="width"):
            MerkleProof(root=ZERO_HASH, width=0, leaf_index=1)
