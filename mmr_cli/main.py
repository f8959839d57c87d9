"""
Module 09C - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m mmr_cli init [--force]
    python -m mmr_cli append <hex> [<hex> ...] [--json]
    python -m mmr_cli root [--json]
    python -m mmr_cli peaks [--json]
    python -m mmr_cli node <index> [--json]
    python -m mmr_cli proof <leaf_index> [--out PATH] [--json]
    python -m mmr_cli verify <proof.json> <hex> [--json] [--debug]
    python -m mmr_cli config --init

Every tree command accepts --state PATH to pick the snapshot file.

Environment Variables:
    MMR_SNAPSHOT_PATH       Snapshot file (default: mmr_state.json)
    MMR_HASHER              Hash backend for new trees and verification
    MMR_FIELD_MODULUS       Field prime as a decimal integer
    MMR_LOG_LEVEL           Log level (default: WARNING)
    MMR_LOG_FILE            Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from mmr_cli.commands import tree, proof
from mmr_cli.config import load_config, get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--state", "-s",
        type=str,
        default=None,
        help="Snapshot file holding the tree (default: from config)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="mmr",
        description="Merkle Mountain Range CLI - Append values, build and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./mmr.json or ~/.config/mmr/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- init command ---
    init_parser = subparsers.add_parser(
        "init",
        help="Create an empty tree",
        description="Write an empty tree snapshot using the configured hasher.",
    )
    _add_common(init_parser)
    init_parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Replace an existing snapshot",
    )
    init_parser.set_defaults(func=tree.init_cmd)

    # --- append command ---
    append_parser = subparsers.add_parser(
        "append",
        help="Append value digests",
        description="Append one or more 0x-prefixed 32-byte value digests in order.",
    )
    append_parser.add_argument(
        "values",
        nargs="+",
        type=str,
        help="Value digests (0x-prefixed hex, 32 bytes each)",
    )
    _add_common(append_parser)
    append_parser.set_defaults(func=tree.append_cmd)

    # --- root / peaks commands ---
    root_parser = subparsers.add_parser("root", help="Show root, width and size")
    _add_common(root_parser)
    root_parser.set_defaults(func=tree.root_cmd)

    peaks_parser = subparsers.add_parser("peaks", help="Show the current peaks")
    _add_common(peaks_parser)
    peaks_parser.set_defaults(func=tree.peaks_cmd)

    # --- node command ---
    node_parser = subparsers.add_parser("node", help="Show a stored node hash")
    node_parser.add_argument("index", type=int, help="Flat 1-based node index")
    _add_common(node_parser)
    node_parser.set_defaults(func=tree.node_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Build an inclusion proof",
        description="Build the inclusion proof for a leaf against the current root.",
    )
    proof_parser.add_argument("leaf_index", type=int, help="Flat 1-based leaf index")
    proof_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof JSON to this file",
    )
    _add_common(proof_parser)
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof offline",
        description="Check a proof file against a value digest. Exit code 2 when invalid.",
    )
    verify_parser.add_argument("proof_path", type=str, help="Proof JSON file")
    verify_parser.add_argument("value", type=str, help="Value digest (0x-prefixed hex)")
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include every check performed",
    )
    verify_parser.set_defaults(func=proof.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="mmr.json",
        help="Path for config file (default: mmr.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MMR_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: mmr config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
