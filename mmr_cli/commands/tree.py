"""
Module 09C - CLI Tree Commands

Create a tree, append to it, and inspect its state. The tree lives in a JSON
snapshot file (--state, default from config) and is rewritten after every
append.

Usage:
    mmr init [--force]
    mmr append <hex> [<hex> ...] [--json]
    mmr root [--json]
    mmr peaks [--json]
    mmr node <index> [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from mmr_core.crypto.hashing import digest_from_hex, to_hex
from mmr_core.merkle.indexing import get_peak_indexes
from mmr_core.merkle.mountain_range import MerkleMountainRange
from mmr_core.merkle.snapshot import load_snapshot, save_snapshot
from mmr_core.schemas.errors import MMRException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def state_path(args: Namespace) -> Path:
    """Snapshot path from --state, falling back to the CLI config."""
    if getattr(args, "state", None):
        return Path(args.state)
    return Path(args.cli_config.state_path)


def load_tree(args: Namespace) -> MerkleMountainRange:
    """
    Load the tree from its snapshot file.

    Raises:
        FileNotFoundError: If the snapshot does not exist yet
    """
    path = state_path(args)
    if not path.exists():
        raise FileNotFoundError(f"No tree at {path} (run 'mmr init' first)")
    return load_snapshot(path)


def emit(args: Namespace, data: dict[str, Any], lines: list[str]) -> None:
    """Print ``data`` as JSON with --json, otherwise the human ``lines``."""
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        for line in lines:
            print(line)


def init_cmd(args: Namespace) -> int:
    """Create an empty tree snapshot."""
    path = state_path(args)
    if path.exists() and not args.force:
        print(f"Error: Tree already exists: {path} (use --force to replace)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    tree = MerkleMountainRange(args.cli_config.build_hasher())
    save_snapshot(tree, path)
    emit(
        args,
        {"state": str(path), "hasher": tree.hasher.name, "root": to_hex(tree.root)},
        [f"Created empty tree: {path} ({tree.hasher.name})"],
    )
    return EXIT_SUCCESS


def append_cmd(args: Namespace) -> int:
    """Append one or more value digests and save the tree."""
    try:
        digests = [digest_from_hex(value.lower()) for value in args.values]
    except (ValueError, MMRException) as e:
        print(f"Error: Invalid value digest: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    tree = load_tree(args)
    leaf_indexes = tree.extend(digests)
    save_snapshot(tree, state_path(args))
    logger.info(f"Appended {len(leaf_indexes)} leaves to {state_path(args)}")

    state = tree.state()
    emit(
        args,
        {
            "leaf_indexes": leaf_indexes,
            "width": state.width,
            "size": state.size,
            "root": to_hex(state.root),
        },
        [f"leaf {i}" for i in leaf_indexes] + [
            f"width: {state.width}",
            f"root: {to_hex(state.root)}",
        ],
    )
    return EXIT_SUCCESS


def root_cmd(args: Namespace) -> int:
    """Show the current root, width and size."""
    state = load_tree(args).state()
    emit(
        args,
        {"root": to_hex(state.root), "width": state.width, "size": state.size},
        [
            f"root: {to_hex(state.root)}",
            f"width: {state.width}",
            f"size: {state.size}",
        ],
    )
    return EXIT_SUCCESS


def peaks_cmd(args: Namespace) -> int:
    """Show the current peaks with their flat indexes."""
    state = load_tree(args).state()
    indexes = get_peak_indexes(state.width)
    emit(
        args,
        {
            "width": state.width,
            "peak_indexes": indexes,
            "peaks": [to_hex(p) for p in state.peaks],
        },
        [f"{i}: {to_hex(p)}" for i, p in zip(indexes, state.peaks)],
    )
    return EXIT_SUCCESS


def node_cmd(args: Namespace) -> int:
    """Show the stored hash at a flat node index."""
    tree = load_tree(args)
    present = tree.has_node(args.index)
    node_hash = to_hex(tree.get_node_hash(args.index))
    emit(
        args,
        {"index": args.index, "hash": node_hash, "present": present},
        [f"{args.index}: {node_hash}" + ("" if present else " (absent)")],
    )
    return EXIT_SUCCESS
