"""
Module 02 - Peak Roll-Up
Append to a commitment knowing only its peaks.

A holder of (root, width, peaks) can extend the commitment without the node
store: the new leaf merges with every trailing peak of equal height, exactly
as the full tree would materialize those parents. The resulting root equals
the one a full MerkleMountainRange reaches after the same appends.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from mmr_core.crypto.field import FieldHasher
from mmr_core.crypto.hashing import to_hex
from mmr_core.merkle.commitments import hash_branch, hash_leaf, peak_bagging
from mmr_core.merkle.indexing import get_leaf_index, num_of_peaks
from mmr_core.schemas.errors import PeakCountMismatchException, RootMismatchException


logger = logging.getLogger(__name__)


def append_to_peaks(
    width: int,
    peaks: Sequence[bytes],
    value_digest: bytes,
    hasher: FieldHasher,
) -> tuple[int, list[bytes]]:
    """
    Append one leaf to a forest given only its peaks.

    Returns:
        (new_width, new_peaks) with new_peaks tallest first

    Raises:
        PeakCountMismatchException: If ``peaks`` does not match ``width``
    """
    expected = num_of_peaks(width)
    if len(peaks) != expected:
        raise PeakCountMismatchException(width, expected, len(peaks))

    new_peaks = list(peaks)
    new_width = width + 1
    index = get_leaf_index(new_width)
    node = hash_leaf(hasher, index, value_digest)

    # each trailing set bit of the old width is a mountain of the carried height
    carry = width
    while carry & 1:
        index += 1
        node = hash_branch(hasher, index, new_peaks.pop(), node)
        carry >>= 1

    new_peaks.append(node)
    return new_width, new_peaks


def roll_up(
    root: bytes,
    width: int,
    peaks: Sequence[bytes],
    value_digests: Iterable[bytes],
    hasher: FieldHasher,
) -> bytes:
    """
    Append ``value_digests`` to the commitment ``root`` and return the new root.

    Raises:
        RootMismatchException: If ``peaks`` do not bag to ``root``
        PeakCountMismatchException: If ``peaks`` does not match ``width``
    """
    bagged = peak_bagging(hasher, width, list(peaks))
    if bagged != root:
        raise RootMismatchException(to_hex(root), to_hex(bagged))

    current = list(peaks)
    for digest in value_digests:
        width, current = append_to_peaks(width, current, digest, hasher)

    new_root = peak_bagging(hasher, width, current)
    logger.debug("Rolled up to width %d (root=%s)", width, to_hex(new_root))
    return new_root


__all__ = [
    "append_to_peaks",
    "roll_up",
]
