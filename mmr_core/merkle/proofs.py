"""
Module 02 - MMR Inclusion Proofs
Proof container and the stateless verifier.

An inclusion proof for the leaf at flat index ``leaf_index`` is

    (root, width, peak_bag, siblings)

- peak_bag: every peak hash of the tree at ``width``, tallest first
- siblings: the hashes met walking from the leaf up to its covering peak,
  leaf-adjacent first

Verification (never raises on untrusted input):
1. leaf_index must be a leaf position inside the index space of ``width``
2. peak_bag must bag to ``root``
3. a peak must cover leaf_index
4. the descent path from that peak must have one step per sibling
5. hashing leaf and siblings bottom-up must reproduce the covering peak

The verifier reads nothing but its arguments. It re-derives every index
from ``width`` with the same functions the tree used to build the proof.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from mmr_core.crypto.field import FieldHasher
from mmr_core.crypto.hashing import digest_from_hex, ensure_digest, to_hex
from mmr_core.merkle.commitments import hash_branch, hash_leaf, peak_bagging
from mmr_core.merkle.indexing import (
    descent_path,
    get_children,
    get_peak_indexes,
    get_size,
    is_leaf,
    peak_position,
)
from mmr_core.schemas.errors import MMRException
from mmr_core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    """
    Self-describing inclusion proof for one leaf.

    Attributes:
        root: Root of the tree the proof was built against
        width: Leaf count of that tree
        leaf_index: 1-based flat index of the proven leaf
        peak_bag: All peak hashes, tallest mountain first
        siblings: Sibling hashes from the leaf level up to the peak
    """
    root: bytes
    width: int
    leaf_index: int
    peak_bag: list[bytes] = field(default_factory=list)
    siblings: list[bytes] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width < 1:
            raise ValueError(f"Proof width must be positive, got {self.width}")
        if self.leaf_index < 1:
            raise ValueError(f"Leaf index must be positive, got {self.leaf_index}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": to_hex(self.root),
            "width": self.width,
            "leaf_index": self.leaf_index,
            "peak_bag": [to_hex(p) for p in self.peak_bag],
            "siblings": [to_hex(s) for s in self.siblings],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleProof":
        """
        Parse a proof produced by ``to_dict``.

        Raises:
            KeyError: If a field is missing
            ValueError: If a hash is not 0x-prefixed hex
            InvalidDigestException: If a hash is not 32 bytes
        """
        return cls(
            root=digest_from_hex(data["root"]),
            width=int(data["width"]),
            leaf_index=int(data["leaf_index"]),
            peak_bag=[digest_from_hex(p) for p in data["peak_bag"]],
            siblings=[digest_from_hex(s) for s in data["siblings"]],
        )


def _resolve_hasher(hasher: FieldHasher | None) -> FieldHasher:
    if hasher is not None:
        return hasher
    # Imported lazily: the config module reads the environment on import
    from mmr_core.config.runtime import get_default_config

    return get_default_config().build_hasher()


def explain_inclusion(
    root: bytes,
    width: int,
    leaf_index: int,
    value_digest: bytes,
    peak_bag: Sequence[bytes],
    siblings: Sequence[bytes],
    hasher: FieldHasher | None = None,
) -> VerificationResult:
    """
    Verify an inclusion proof and report every check performed.

    Stops at the first failed check. Malformed input (wrong lengths,
    non-canonical field elements, negative widths) is reported as a failed
    check rather than raised.

    Returns:
        VerificationResult with ok=True iff the leaf is included under root
    """
    hasher = _resolve_hasher(hasher)
    result = VerificationResult()

    def fail(check_id: str, message: str, **details: Any) -> VerificationResult:
        logger.debug("Inclusion check %s failed: %s", check_id, message)
        result.add_check(CheckResult.failed(check_id, message, details=details))
        return result

    try:
        size = get_size(width)
        if not 1 <= leaf_index <= size:
            return fail(
                "size_bound",
                f"Leaf index {leaf_index} outside index space of width {width}",
                leaf_index=leaf_index,
                size=size,
            )
        result.add_check(CheckResult.passed("size_bound", details={"size": size}))

        if not is_leaf(leaf_index):
            return fail(
                "leaf_position",
                f"Index {leaf_index} is an internal node",
                leaf_index=leaf_index,
            )
        result.add_check(CheckResult.passed("leaf_position"))

        try:
            bagged = peak_bagging(hasher, width, list(peak_bag))
        except MMRException as e:
            return fail("peak_bagging", e.message, code=e.code)
        if bagged != ensure_digest(root):
            return fail(
                "peak_bagging",
                "Peak bag does not hash to the claimed root",
                expected=to_hex(root),
                actual=to_hex(bagged),
            )
        result.add_check(CheckResult.passed("peak_bagging", "Peaks bag to root"))

        try:
            position = peak_position(width, leaf_index)
        except MMRException as e:
            return fail("target_peak", e.message, code=e.code)
        peak_index = get_peak_indexes(width)[position]
        target_peak = peak_bag[position]
        result.add_check(
            CheckResult.passed(
                "target_peak",
                details={"peak_index": peak_index, "position": position},
            )
        )

        path = descent_path(peak_index, leaf_index)
        if len(path) - 1 != len(siblings):
            return fail(
                "path_length",
                f"Expected {len(path) - 1} siblings, got {len(siblings)}",
                expected=len(path) - 1,
                actual=len(siblings),
            )
        result.add_check(CheckResult.passed("path_length"))

        node = hash_leaf(hasher, leaf_index, value_digest)
        # path runs peak -> leaf; walk it leaf -> peak alongside the siblings
        for level, sibling in enumerate(siblings):
            child = path[-1 - level]
            parent = path[-2 - level]
            _, right = get_children(parent)
            if right == child:
                node = hash_branch(hasher, parent, sibling, node)
            else:
                node = hash_branch(hasher, parent, node, sibling)

        if node != target_peak:
            return fail(
                "peak_hash",
                "Recomputed peak does not match the peak bag entry",
                peak_index=peak_index,
                expected=to_hex(target_peak),
                actual=to_hex(node),
            )
        result.add_check(CheckResult.passed("peak_hash", "Leaf authenticates to peak"))
    except MMRException as e:
        result.error = e.to_error_model()
        return fail("proof_format", e.message, code=e.code)

    return result


def verify_inclusion(
    root: bytes,
    width: int,
    leaf_index: int,
    value_digest: bytes,
    peak_bag: Sequence[bytes],
    siblings: Sequence[bytes],
    hasher: FieldHasher | None = None,
) -> bool:
    """
    Verify that ``value_digest`` sits at ``leaf_index`` under ``root``.

    Pure function of its arguments; returns False for any bad or
    malformed proof instead of raising.
    """
    return explain_inclusion(
        root, width, leaf_index, value_digest, peak_bag, siblings, hasher
    ).ok


def verify_proof(
    proof: MerkleProof,
    value_digest: bytes,
    hasher: FieldHasher | None = None,
) -> bool:
    """Verify a MerkleProof for the given leaf value."""
    return verify_inclusion(
        proof.root,
        proof.width,
        proof.leaf_index,
        value_digest,
        proof.peak_bag,
        proof.siblings,
        hasher,
    )


__all__ = [
    "MerkleProof",
    "explain_inclusion",
    "verify_inclusion",
    "verify_proof",
]
