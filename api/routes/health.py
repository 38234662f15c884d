"""
Health Check Route

Liveness probe that also reports which pool parameters the service
builds witnesses for.
"""

from fastapi import APIRouter

from api.deps import get_runtime_config
from api.models.responses import HealthResponse
from core.crypto.hashing import SHA256_BACKEND


router = APIRouter(tags=["health"])


def _health() -> HealthResponse:
    pool = get_runtime_config().pool
    return HealthResponse(
        hash_backend=pool.hash_backend,
        tree_height=pool.tree_height,
        circuit_compatible=pool.hash_backend != SHA256_BACKEND,
        refund_allowed=pool.refund_allowed,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    A client whose hash backend or tree height differs from the one
    reported here will compute roots the ledger does not recognise.
    """
    return _health()


@router.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    return _health()
