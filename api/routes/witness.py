"""
Witness Route

Build a withdrawal witness for a deposit note.

The request carries the note's secret and nullifier; neither is logged.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.deps import get_witness_builder
from api.models.requests import WitnessRequest
from api.models.responses import WitnessResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["witness"])


@router.post("/witness", response_model=WitnessResponse)
async def build_witness(request: WitnessRequest) -> WitnessResponse:
    """
    Validate the withdrawal and assemble the circuit input.

    Local failures (unknown or blocked deposit, fee, refund) are returned
    as structured errors before any tree is built where possible.
    """
    builder = get_witness_builder()
    witness = builder.generate_withdrawal_witness(
        request.note,
        request.deposits,
        frozenset(request.blocklist),
        recipient=request.recipient,
        relayer=request.relayer,
        fee=request.fee,
        refund=request.refund,
        denomination=request.denomination,
    )
    logger.info(f"Built witness for leaf {witness.leaf_index}")

    return WitnessResponse(
        leaf_index=witness.leaf_index,
        public_signals=witness.public_signals_hex(),
        circuit_input=witness.to_circuit_input(),
    )
