"""
Module 02 - Merkle Mountain Range and Commitments
Append-only MMR, inclusion proof generation and stateless verification.

This module provides:
- MerkleMountainRange: the tree (write-once node store, append, proofs)
- MerkleProof: Dataclass representing an inclusion proof
- verify_inclusion / explain_inclusion / verify_proof: stateless verifier
- Index arithmetic over the flat 1-based node index space
- append_to_peaks / roll_up: appending with peaks only
- save_snapshot / load_snapshot: JSON persistence of a tree

Canonical Commitment Rules:
1. Leaf hashing:   hash2(index, value mod p)
2. Branch hashing: hash3(index, left, right)
3. Peak bagging:   hash2(size, fold(hash2, size, peaks))
4. Empty tree:     32 zero bytes

Usage:
    from mmr_core.merkle import MerkleMountainRange, verify_proof
    from mmr_core.crypto import sha256

    tree = MerkleMountainRange()
    leaf_index = tree.append(sha256(b"payload"))
    proof = tree.get_merkle_proof(leaf_index)
    assert verify_proof(proof, sha256(b"payload"))
"""
from .indexing import (
    num_of_peaks,
    get_size,
    get_leaf_index,
    get_peak_indexes,
    height_at,
    is_leaf,
    get_children,
    subtree_span,
    peak_position,
    descent_path,
)

from .commitments import (
    hash_leaf,
    hash_branch,
    peak_bagging,
)

from .proofs import (
    MerkleProof,
    explain_inclusion,
    verify_inclusion,
    verify_proof,
)

from .mountain_range import (
    MerkleMountainRange,
    TreeState,
)

from .rollup import (
    append_to_peaks,
    roll_up,
)

from .snapshot import (
    TreeSnapshot,
    save_snapshot,
    load_snapshot,
)


__all__ = [
    # Index arithmetic
    "num_of_peaks",
    "get_size",
    "get_leaf_index",
    "get_peak_indexes",
    "height_at",
    "is_leaf",
    "get_children",
    "subtree_span",
    "peak_position",
    "descent_path",
    # Commitments
    "hash_leaf",
    "hash_branch",
    "peak_bagging",
    # Proofs
    "MerkleProof",
    "explain_inclusion",
    "verify_inclusion",
    "verify_proof",
    # Tree
    "MerkleMountainRange",
    "TreeState",
    # Roll-up
    "append_to_peaks",
    "roll_up",
    # Snapshots
    "TreeSnapshot",
    "save_snapshot",
    "load_snapshot",
]
