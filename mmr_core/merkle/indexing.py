"""
Module 02 - MMR Index Arithmetic
Pure functions over the 1-based flat index space shared by the leaves and
internal nodes of every mountain.

Layout: each mountain is a perfect binary tree numbered in post-order, so a
node's left subtree is numbered first, then its right subtree, then the node
itself. Mountains follow each other left to right, tallest first. With
width = 10 (0b1010) the forest is

                 15
           7            14
        3     6     10      13      18
       1 2   4 5   8  9   11  12  16  17

and the leaves sit at 1, 2, 4, 5, 8, 9, 11, 12, 16, 17.

Every function here is deterministic and state-free; the tree, the proof
builder and the stateless verifier all derive indices from these alone.
"""
from __future__ import annotations

from mmr_core.schemas.errors import (
    IndexOutOfRangeException,
    InvalidParentException,
    InvalidWidthException,
    PeakNotFoundException,
)


def _check_width(width: int) -> None:
    if width < 0:
        raise InvalidWidthException(width)


def _check_index(index: int) -> None:
    if index < 1:
        raise IndexOutOfRangeException(index, message=f"Node indices start at 1, got {index}")


def num_of_peaks(width: int) -> int:
    """Number of mountains for ``width`` leaves: one per set bit."""
    _check_width(width)
    return bin(width).count("1")


def get_size(width: int) -> int:
    """Total node count (leaves + internal) of the forest over ``width`` leaves."""
    _check_width(width)
    return (width << 1) - num_of_peaks(width)


def get_leaf_index(width: int) -> int:
    """
    Flat index assigned to the ``width``-th appended leaf.

    An odd width closes no mountain, so the new leaf is the last node of the
    forest. An even width means the leaf is followed by the parents it
    completes, so it sits right after the forest of ``width - 1`` leaves.
    """
    if width < 1:
        raise InvalidWidthException(width, "Leaf index is defined for width >= 1")
    if width % 2 == 1:
        return get_size(width)
    return get_size(width - 1) + 1


def get_peak_indexes(width: int) -> list[int]:
    """
    Apex index of every mountain, tallest first.

    Set bit ``i`` of ``width`` is a mountain of height ``i + 1`` holding
    ``2^(i+1) - 1`` nodes; each apex is the running node total.
    """
    _check_width(width)
    peak_indexes: list[int] = []
    total = 0
    for bit in range(width.bit_length() - 1, -1, -1):
        if width >> bit & 1:
            total += (1 << (bit + 1)) - 1
            peak_indexes.append(total)
    return peak_indexes


def height_at(index: int) -> int:
    """
    Height of the node at ``index`` (1 for a leaf).

    An index of the form 2^h - 1 is the apex of the leftmost mountain of
    height h. Any other index lies to the right of a complete left subtree of
    2^(k-1) - 1 nodes, where k is its bit length; stripping that subtree maps
    it to the same node position inside the next mountain or right slope.
    """
    _check_index(index)
    pos = index
    while (pos + 1) & pos:
        pos -= (1 << (pos.bit_length() - 1)) - 1
    return pos.bit_length()


def is_leaf(index: int) -> bool:
    return height_at(index) == 1


def get_children(index: int) -> tuple[int, int]:
    """
    Return ``(left, right)`` child indices of the node at ``index``.

    The right child immediately precedes its parent; the left child precedes
    the right subtree's ``2^(h-1) - 1`` nodes.

    Raises:
        InvalidParentException: If ``index`` is a leaf
    """
    height = height_at(index)
    left = index - (1 << (height - 1))
    right = index - 1
    if left == right:
        raise InvalidParentException(index)
    return left, right


def subtree_span(index: int) -> tuple[int, int]:
    """First and last flat index covered by the subtree rooted at ``index``."""
    height = height_at(index)
    return index - (1 << height) + 2, index


def peak_position(width: int, index: int) -> int:
    """
    Position in ``get_peak_indexes(width)`` of the mountain covering ``index``.

    That is the first peak (tallest first, so ascending index) whose apex
    index is at least ``index``.

    Raises:
        PeakNotFoundException: If ``index`` lies beyond the last peak
    """
    _check_index(index)
    for position, peak_index in enumerate(get_peak_indexes(width)):
        if peak_index >= index:
            return position
    raise PeakNotFoundException(index, width)


def descent_path(peak_index: int, leaf_index: int) -> list[int]:
    """
    Node indices from ``peak_index`` down to ``leaf_index``, peak first.

    At each node the walk takes the left child when ``leaf_index`` is at most
    the left child's index, otherwise the right child.

    Raises:
        IndexOutOfRangeException: If ``leaf_index`` is not under ``peak_index``
    """
    first, last = subtree_span(peak_index)
    if not first <= leaf_index <= last:
        raise IndexOutOfRangeException(
            leaf_index,
            message=f"Index {leaf_index} is not under peak {peak_index} (span {first}..{last})",
        )
    path = [peak_index]
    current = peak_index
    while current != leaf_index:
        left, right = get_children(current)
        current = left if leaf_index <= left else right
        path.append(current)
    return path


__all__ = [
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
]
