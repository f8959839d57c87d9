"""
CLI command modules.
"""

from mmr_cli.commands import tree, proof

__all__ = ["tree", "proof"]
