"""
Module 02 - MMR Commitment Hashing
Leaf, branch and peak-bagging hashes.

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing:   leaf   = hash2(index, value mod p)
2. Branch hashing: branch = hash3(index, left, right)
3. Peak bagging:   acc = size; acc = hash2(acc, peak) for each peak
                   (tallest first); root = hash2(size, acc)
4. Empty tree:     root = 32 zero bytes

Binding the node index into leaf and branch hashes pins every hash to its
position, so a proof cannot be replayed at another index. Binding size at
both ends of the bag ties the root to the exact leaf count.

All node hashes cross this module as 32-byte big-endian encodings of
canonical field elements.
"""
from __future__ import annotations

from typing import Sequence

from mmr_core.crypto.field import FieldHasher
from mmr_core.crypto.hashing import ZERO_HASH
from mmr_core.merkle.indexing import get_size, num_of_peaks
from mmr_core.schemas.errors import PeakCountMismatchException


def hash_leaf(hasher: FieldHasher, index: int, value_digest: bytes) -> bytes:
    """Hash a leaf value at ``index``; the digest is reduced into the field first."""
    value = hasher.reduce(value_digest)
    return hasher.to_bytes(hasher.hash2(index, value))


def hash_branch(hasher: FieldHasher, index: int, left: bytes, right: bytes) -> bytes:
    """Hash an internal node from its index and its children's hashes."""
    return hasher.to_bytes(
        hasher.hash3(index, hasher.to_field(left), hasher.to_field(right))
    )


def peak_bagging(hasher: FieldHasher, width: int, peaks: Sequence[bytes]) -> bytes:
    """
    Fold the peak hashes of a ``width``-leaf forest into the root.

    Raises:
        PeakCountMismatchException: If ``len(peaks)`` is not popcount(width)
        FieldElementException: If a peak is not a canonical field element
    """
    expected = num_of_peaks(width)
    if len(peaks) != expected:
        raise PeakCountMismatchException(width, expected, len(peaks))
    if width == 0:
        return ZERO_HASH

    size = get_size(width)
    acc = size
    for peak in peaks:
        acc = hasher.hash2(acc, hasher.to_field(peak))
    return hasher.to_bytes(hasher.hash2(size, acc))


__all__ = [
    "hash_leaf",
    "hash_branch",
    "peak_bagging",
]
