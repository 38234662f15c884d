"""
Tree Routes

Zero ladder and snapshot roots.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query

from api.deps import get_hasher, get_runtime_config
from api.models.requests import RootsRequest
from api.models.responses import RootsResponse, ZerosResponse
from core.crypto.field import to_fixed_hex
from core.merkle.subset import build_tree_pair
from core.merkle.zero_ladder import get_zero_ladder


logger = logging.getLogger(__name__)

router = APIRouter(tags=["trees"])


@router.get("/zeros", response_model=ZerosResponse)
async def get_zeros(
    height: int | None = Query(default=None, ge=0, description="Tree height (default: configured)"),
) -> ZerosResponse:
    """Return the zero ladder zeros[0..height]."""
    config = get_runtime_config()
    pool = config.pool
    ladder = get_zero_ladder(
        get_hasher(config),
        pool.zero_element,
        pool.tree_height if height is None else height,
        pool.max_tree_height,
    )
    return ZerosResponse(
        hash_backend=pool.hash_backend,
        height=ladder.height,
        zero_element=to_fixed_hex(ladder.zero_element),
        zeros=[to_fixed_hex(z) for z in ladder.zeros],
        empty_root=to_fixed_hex(ladder.root),
    )


@router.post("/roots", response_model=RootsResponse)
async def compute_roots(request: RootsRequest) -> RootsResponse:
    """
    Build both trees over the snapshot and return their roots.
    """
    config = get_runtime_config()
    pool = config.pool
    block_set = frozenset(request.blocklist)

    pair = build_tree_pair(
        request.deposits,
        block_set,
        pool.tree_height,
        get_hasher(config),
        pool.zero_element,
        pool.max_tree_height,
    )
    blocked = sum(1 for r in request.deposits if r.commitment in block_set)
    logger.info(f"Computed roots: deposits={len(request.deposits)} blocked={blocked}")

    return RootsResponse(
        deposits=len(request.deposits),
        blocked=blocked,
        height=pool.tree_height,
        root=to_fixed_hex(pair.root),
        subset_root=to_fixed_hex(pair.subset_root),
    )
