"""
Mountain Range Commitments - core engine.

Append-only Merkle Mountain Range over a prime field with succinct
inclusion proofs.
"""

__version__ = "0.1.0"
