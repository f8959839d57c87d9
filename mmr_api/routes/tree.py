"""
Module 09D - Tree Routes

Append to the served tree and read its committed state.

Handlers are plain (sync) functions, so FastAPI runs them in its threadpool;
the tree's lock serializes appends.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from mmr_api.deps import get_tree, persist_tree
from mmr_api.models.requests import AppendRequest
from mmr_api.models.responses import (
    AppendResponse,
    NodeResponse,
    PeaksResponse,
    RootResponse,
)
from mmr_core.crypto.hashing import digest_from_hex, to_hex
from mmr_core.merkle.indexing import get_peak_indexes
from mmr_core.merkle.mountain_range import MerkleMountainRange


logger = logging.getLogger(__name__)

router = APIRouter(tags=["tree"])


@router.post("/append", response_model=AppendResponse)
def append_value(
    request: AppendRequest,
    tree: MerkleMountainRange = Depends(get_tree),
) -> AppendResponse:
    """Append a 32-byte value digest and return its leaf index."""
    leaf_index, state = tree.append_with_state(digest_from_hex(request.value.lower()))
    persist_tree(tree)
    logger.info(f"Appended leaf {leaf_index} (width={state.width})")
    return AppendResponse(
        ok=True,
        leaf_index=leaf_index,
        width=state.width,
        size=state.size,
        root=to_hex(state.root),
    )


@router.get("/root", response_model=RootResponse)
def get_root(tree: MerkleMountainRange = Depends(get_tree)) -> RootResponse:
    """Current root, width and size."""
    state = tree.state()
    return RootResponse(root=to_hex(state.root), width=state.width, size=state.size)


@router.get("/peaks", response_model=PeaksResponse)
def get_peaks(tree: MerkleMountainRange = Depends(get_tree)) -> PeaksResponse:
    """Current peak hashes with their flat indexes, tallest first."""
    state = tree.state()
    return PeaksResponse(
        width=state.width,
        peak_indexes=get_peak_indexes(state.width),
        peaks=[to_hex(p) for p in state.peaks],
    )


@router.get("/nodes/{index}", response_model=NodeResponse)
def get_node(index: int, tree: MerkleMountainRange = Depends(get_tree)) -> NodeResponse:
    """Stored hash at a flat node index (zero hash when not materialized)."""
    return NodeResponse(
        index=index,
        hash=to_hex(tree.get_node_hash(index)),
        present=tree.has_node(index),
    )
