"""
Test fixtures package for mountain range tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_tree, make_digest

    def test_something():
        tree = make_tree(10)
        proof = tree.get_merkle_proof(17)
"""

from .common import (
    CountingHasher,
    make_digest,
    make_digests,
    make_tree,
)

__all__ = [
    "CountingHasher",
    "make_digest",
    "make_digests",
    "make_tree",
]
