"""
Module 02 - Merkle Mountain Range
Append-only tree with a write-once node store.

Append:
1. width += 1 and the new leaf gets index get_leaf_index(width)
2. the leaf hash is stored at that (fresh) index
3. every current peak is materialized; internal nodes already stored by
   earlier appends are reused, missing ones are hashed bottom-up
4. the root is re-bagged from the ordered peak hashes

Node hashes are addressed by position and never change once written.
A node that was a peak simply becomes an inner node of a taller mountain
later on; nothing below a stored node is ever touched again.

Concurrency:
- One writer at a time: append/extend hold the tree lock
- New node hashes are staged and published together with width and root,
  so readers never observe a half-applied append
- Proofs are built under the same lock from one committed state
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Mapping

from mmr_core.crypto.field import FieldHasher
from mmr_core.crypto.hashing import ZERO_HASH, ensure_digest, to_hex
from mmr_core.merkle.commitments import hash_branch, hash_leaf, peak_bagging
from mmr_core.merkle.indexing import (
    descent_path,
    get_children,
    get_leaf_index,
    get_peak_indexes,
    get_size,
    height_at,
    is_leaf,
    peak_position,
)
from mmr_core.merkle.proofs import MerkleProof
from mmr_core.schemas.errors import (
    IndexOutOfRangeException,
    NodeOverwriteException,
    NotALeafException,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeState:
    """Read-only view of a committed tree state."""
    root: bytes
    width: int
    size: int
    peaks: tuple[bytes, ...]


class MerkleMountainRange:
    """
    Merkle Mountain Range over 32-byte value digests.

    Example:
        >>> tree = MerkleMountainRange()
        >>> tree.append(sha256(b"a"))
        1
        >>> tree.append(sha256(b"b"))
        2
        >>> proof = tree.get_merkle_proof(2)
        >>> verify_proof(proof, sha256(b"b"))
        True
    """

    def __init__(self, hasher: FieldHasher | None = None) -> None:
        if hasher is None:
            from mmr_core.config.runtime import get_default_config

            hasher = get_default_config().build_hasher()
        self.hasher = hasher
        self._nodes: dict[int, bytes] = {}
        self._width = 0
        self._root = ZERO_HASH
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def root(self) -> bytes:
        return self._root

    @property
    def width(self) -> int:
        return self._width

    @property
    def size(self) -> int:
        return get_size(self._width)

    def get_root(self) -> bytes:
        return self._root

    def get_width(self) -> int:
        return self._width

    def get_size(self) -> int:
        return self.size

    def has_node(self, index: int) -> bool:
        return index in self._nodes

    def get_node_hash(self, index: int) -> bytes:
        """Stored hash at ``index``, or ZERO_HASH if not materialized."""
        return self._nodes.get(index, ZERO_HASH)

    def get_peaks(self) -> list[bytes]:
        """Current peak hashes, tallest mountain first."""
        with self._lock:
            return [self._nodes[i] for i in get_peak_indexes(self._width)]

    def nodes(self) -> dict[int, bytes]:
        """Copy of the node store."""
        with self._lock:
            return dict(self._nodes)

    def state(self) -> TreeState:
        with self._lock:
            return TreeState(
                root=self._root,
                width=self._width,
                size=self.size,
                peaks=tuple(self.get_peaks()),
            )

    def export(self) -> tuple[TreeState, dict[int, bytes]]:
        """Committed state and a copy of its node store, read atomically."""
        with self._lock:
            return self.state(), dict(self._nodes)

    def __len__(self) -> int:
        return self._width

    def __repr__(self) -> str:
        return (
            f"MerkleMountainRange(width={self._width}, size={self.size}, "
            f"root={to_hex(self._root)})"
        )

    # ------------------------------------------------------------------
    # Append
    # ------------------------------------------------------------------

    def append(self, value_digest: bytes) -> int:
        """
        Append a 32-byte value digest and return its leaf index.

        Raises:
            InvalidDigestException: If the digest is not 32 bytes
        """
        value_digest = ensure_digest(value_digest)
        with self._lock:
            width = self._width + 1
            leaf_index = get_leaf_index(width)
            if leaf_index in self._nodes:
                raise NodeOverwriteException(leaf_index)

            staged = {leaf_index: hash_leaf(self.hasher, leaf_index, value_digest)}
            size = get_size(width)
            peaks = [
                self._get_or_create(peak_index, size, staged)
                for peak_index in get_peak_indexes(width)
            ]
            root = peak_bagging(self.hasher, width, peaks)

            self._nodes.update(staged)
            self._width = width
            self._root = root

        logger.debug(
            "Appended leaf %d (width=%d, new_nodes=%d, root=%s)",
            leaf_index, width, len(staged), to_hex(root),
        )
        return leaf_index

    def append_with_state(self, value_digest: bytes) -> tuple[int, TreeState]:
        """Append a digest; returns its leaf index and the state it committed."""
        with self._lock:
            leaf_index = self.append(value_digest)
            return leaf_index, self.state()

    def extend(self, value_digests: Iterable[bytes]) -> list[int]:
        """Append digests in order; returns their leaf indexes."""
        digests = [ensure_digest(digest) for digest in value_digests]
        with self._lock:
            return [self.append(digest) for digest in digests]

    def _lookup(self, index: int, staged: Mapping[int, bytes]) -> bytes | None:
        node = staged.get(index)
        if node is None:
            node = self._nodes.get(index)
        return node

    def _get_or_create(self, index: int, size: int, staged: dict[int, bytes]) -> bytes:
        """
        Return the hash at ``index``, materializing missing descendants.

        Iterative post-order walk: a node is hashed once both children are
        available, and anything already stored is reused as is. Depth is
        bounded by the mountain height.
        """
        if index > size:
            raise IndexOutOfRangeException(index, size)

        stack = [index]
        while stack:
            current = stack[-1]
            if self._lookup(current, staged) is not None:
                stack.pop()
                continue
            left, right = get_children(current)
            left_hash = self._lookup(left, staged)
            right_hash = self._lookup(right, staged)
            if left_hash is None or right_hash is None:
                if right_hash is None:
                    stack.append(right)
                if left_hash is None:
                    stack.append(left)
                continue
            staged[current] = hash_branch(self.hasher, current, left_hash, right_hash)
            stack.pop()
        return self._lookup(index, staged)

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def get_merkle_proof(self, leaf_index: int) -> MerkleProof:
        """
        Build the inclusion proof for the leaf at ``leaf_index``.

        Raises:
            IndexOutOfRangeException: If ``leaf_index`` is outside 1..size
            NotALeafException: If ``leaf_index`` is an internal node
            PeakNotFoundException: If no peak covers ``leaf_index``
        """
        with self._lock:
            width = self._width
            size = get_size(width)
            if not 1 <= leaf_index <= size:
                raise IndexOutOfRangeException(leaf_index, size)
            if not is_leaf(leaf_index):
                raise NotALeafException(leaf_index, height_at(leaf_index))

            peaks = self.get_peaks()
            position = peak_position(width, leaf_index)
            path = descent_path(get_peak_indexes(width)[position], leaf_index)

            siblings: list[bytes] = []
            for parent, child in zip(path, path[1:]):
                left, right = get_children(parent)
                siblings.append(self._nodes[right if child == left else left])
            siblings.reverse()

            return MerkleProof(
                root=self._root,
                width=width,
                leaf_index=leaf_index,
                peak_bag=peaks,
                siblings=siblings,
            )

    # ------------------------------------------------------------------
    # Restoring
    # ------------------------------------------------------------------

    @classmethod
    def from_nodes(
        cls,
        width: int,
        nodes: Mapping[int, bytes],
        hasher: FieldHasher | None = None,
    ) -> "MerkleMountainRange":
        """
        Rebuild a tree from a stored node map without rehashing.

        ``nodes`` must hold every index in 1..get_size(width). The root is
        re-bagged from the stored peaks; callers that need to trust the
        nodes compare it against a root they already hold.

        Raises:
            IndexOutOfRangeException: If a node index exceeds get_size(width)
            KeyError: If any index in 1..get_size(width) is missing
        """
        tree = cls(hasher)
        size = get_size(width)
        for index, node in nodes.items():
            if not 1 <= index <= size:
                raise IndexOutOfRangeException(index, size)
            tree._nodes[index] = ensure_digest(node)
        missing = [i for i in range(1, size + 1) if i not in tree._nodes]
        if missing:
            raise KeyError(f"Missing {len(missing)} node(s), first at index {missing[0]}")
        tree._width = width
        tree._root = peak_bagging(
            tree.hasher, width, [tree._nodes[i] for i in get_peak_indexes(width)]
        )
        return tree


__all__ = [
    "MerkleMountainRange",
    "TreeState",
]
