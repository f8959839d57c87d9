"""API route handlers."""

from mmr_api.routes import health, tree, proofs

__all__ = ["health", "tree", "proofs"]
