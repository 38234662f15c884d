"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "privacy-pool-witness-api"
    version: str = "v1"
    hash_backend: str = Field(..., description="Configured hash primitive")
    tree_height: int = Field(..., description="Configured tree height")
    circuit_compatible: bool = Field(
        ...,
        description="False when the sha256 stand-in is configured instead of the verifier's hash",
    )
    refund_allowed: bool = False


class ZerosResponse(BaseModel):
    """Response for GET /zeros endpoint."""

    ok: bool = True
    hash_backend: str = Field(..., description="Configured hash primitive")
    height: int = Field(..., description="Tree height")
    zero_element: str = Field(..., description="Level-0 zero element (hex)")
    zeros: list[str] = Field(..., description="zeros[0..height] as 32-byte hex")
    empty_root: str = Field(..., description="Root of the empty tree")


class RootsResponse(BaseModel):
    """Response for POST /roots endpoint."""

    ok: bool = True
    deposits: int = Field(..., description="Number of deposits in the snapshot")
    blocked: int = Field(..., description="Number of blocked deposits in the snapshot")
    height: int = Field(..., description="Tree height")
    root: str = Field(..., description="Commitment tree root")
    subset_root: str = Field(..., description="Allow-list tree root")


class WitnessResponse(BaseModel):
    """Response for POST /witness endpoint."""

    ok: bool = True
    leaf_index: int = Field(..., description="Position of the deposit in both trees")
    public_signals: list[str] = Field(
        ...,
        description="[root, subsetRoot, nullifierHash, recipient, relayer, fee, refund] as hex",
    )
    circuit_input: dict[str, Any] = Field(..., description="Prover input with all numbers stringified")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)
    retryable: bool = Field(default=False, description="Whether a refreshed snapshot may succeed")


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
