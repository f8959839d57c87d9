"""
Module 09D - Proof Routes

Build inclusion proofs from the served tree and verify proofs statelessly.
Verification never touches the served tree: it answers for any root.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from mmr_api.deps import get_config, get_tree
from mmr_api.errors import InvalidRequestError
from mmr_api.models.requests import VerifyRequest
from mmr_api.models.responses import ProofResponse, VerifyResponse
from mmr_core.crypto.hashing import from_hex
from mmr_core.merkle.mountain_range import MerkleMountainRange
from mmr_core.merkle.proofs import explain_inclusion


logger = logging.getLogger(__name__)

router = APIRouter(tags=["proofs"])


@router.get("/proofs/{leaf_index}", response_model=ProofResponse)
def get_proof(
    leaf_index: int,
    tree: MerkleMountainRange = Depends(get_tree),
) -> ProofResponse:
    """Inclusion proof for the leaf at ``leaf_index`` against the current root."""
    proof = tree.get_merkle_proof(leaf_index)
    return ProofResponse(**proof.to_dict())


def _decode_all(values: list[str], field_name: str) -> list[bytes]:
    try:
        return [from_hex(v.lower()) for v in values]
    except ValueError as e:
        raise InvalidRequestError(
            f"Invalid hex in {field_name}: {e}",
            details={"field": field_name},
        )


@router.post("/verify", response_model=VerifyResponse)
def verify_proof(request: VerifyRequest) -> VerifyResponse:
    """
    Verify an inclusion proof.

    Always answers 200 for well-formed requests; ``ok`` carries the verdict.
    """
    peak_bag = _decode_all(request.peak_bag, "peak_bag")
    siblings = _decode_all(request.siblings, "siblings")

    result = explain_inclusion(
        root=from_hex(request.root.lower()),
        width=request.width,
        leaf_index=request.leaf_index,
        value_digest=from_hex(request.value.lower()),
        peak_bag=peak_bag,
        siblings=siblings,
        hasher=get_config().build_hasher(),
    )
    logger.info(f"Verified leaf {request.leaf_index} at width {request.width}: ok={result.ok}")

    return VerifyResponse(
        ok=result.ok,
        checks=[c.model_dump() for c in result.checks] if request.include_checks else [],
        errors=result.get_error_messages(),
    )
