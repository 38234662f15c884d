"""API request and response models."""

from api.models.requests import RootsRequest, WitnessRequest
from api.models.responses import (
    HealthResponse,
    ZerosResponse,
    RootsResponse,
    WitnessResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "RootsRequest",
    "WitnessRequest",
    "HealthResponse",
    "ZerosResponse",
    "RootsResponse",
    "WitnessResponse",
    "ErrorDetail",
    "ErrorResponse",
]
