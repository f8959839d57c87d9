"""
Module 09C - CLI Proof Commands

Build an inclusion proof from the stored tree, or verify a proof file offline.
Verification needs nothing but the proof and the value.

Usage:
    mmr proof <leaf_index> [--out FILE] [--json]
    mmr verify <proof.json> <hex> [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from mmr_cli.commands.tree import emit, load_tree
from mmr_core.crypto.hashing import digest_from_hex
from mmr_core.merkle.proofs import MerkleProof, explain_inclusion
from mmr_core.schemas.errors import MMRException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def proof_cmd(args: Namespace) -> int:
    """Build the inclusion proof for a leaf."""
    proof = load_tree(args).get_merkle_proof(args.leaf_index)
    data = proof.to_dict()

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(data, indent=2))
        logger.info(f"Wrote proof for leaf {args.leaf_index} to {out_path}")
        if not args.json:
            print(f"Wrote proof: {out_path}")
            return EXIT_SUCCESS

    if args.json or not args.out:
        print(json.dumps(data, indent=2))
    return EXIT_SUCCESS


def verify_cmd(args: Namespace) -> int:
    """Verify a proof file against a value digest."""
    proof_path = Path(args.proof_path)
    if not proof_path.exists():
        print(f"Error: Proof file not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        proof = MerkleProof.from_dict(json.loads(proof_path.read_text()))
        value = digest_from_hex(args.value.lower())
    except (KeyError, TypeError, ValueError, MMRException) as e:
        print(f"Error: Malformed proof or value: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    result = explain_inclusion(
        proof.root,
        proof.width,
        proof.leaf_index,
        value,
        proof.peak_bag,
        proof.siblings,
        args.cli_config.build_hasher(),
    )

    data = {
        "ok": result.ok,
        "leaf_index": proof.leaf_index,
        "width": proof.width,
        "errors": result.get_error_messages(),
    }
    if args.debug:
        data["checks"] = [c.model_dump() for c in result.checks]

    lines = [f"ok: {str(result.ok).lower()}"]
    failed = result.failed_check
    if failed is not None and not args.debug:
        lines.append(f"  ✗ {failed.check_id}: {failed.message}")
    if args.debug:
        for check in result.checks:
            mark = "✓" if check.ok else "✗"
            lines.append(f"  {mark} {check.check_id}: {check.message}")
    emit(args, data, lines)

    return EXIT_SUCCESS if result.ok else EXIT_VERIFICATION_FAILED
