"""
Common test fixtures shared by all modules.

Provides factory functions for core mountain range objects:
- value digests
- populated trees
- a hasher that counts its compressions

Digests are derived from their position (sha256(b"leaf-<n>")) so every test
sees the same values without sharing state.
"""

from mmr_core.crypto.field import FieldHasher, Sha256FieldHasher
from mmr_core.crypto.hashing import sha256
from mmr_core.merkle.mountain_range import MerkleMountainRange


def make_digest(n: int) -> bytes:
    """Deterministic 32-byte value digest for the n-th appended value (1-based)."""
    return sha256(f"leaf-{n}".encode())


def make_digests(count: int, start: int = 1) -> list[bytes]:
    """``count`` consecutive value digests, starting at the ``start``-th value."""
    return [make_digest(n) for n in range(start, start + count)]


def make_tree(width: int = 10, hasher: FieldHasher | None = None) -> MerkleMountainRange:
    """Tree with ``width`` leaves appended from make_digests."""
    tree = MerkleMountainRange(hasher or Sha256FieldHasher())
    tree.extend(make_digests(width))
    return tree


class CountingHasher(Sha256FieldHasher):
    """Sha256FieldHasher that records how often each arity is evaluated."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls = {2: 0, 3: 0}

    def _compress(self, elements: tuple[int, ...]) -> int:
        self.calls[len(elements)] += 1
        return super()._compress(elements)

    def reset(self) -> None:
        self.calls = {2: 0, 3: 0}

    @property
    def branch_calls(self) -> int:
        return self.calls[3]
