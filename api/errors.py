"""
API Error Handling

Maps engine exceptions onto structured error responses.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, PoolException


logger = logging.getLogger(__name__)


# Engine errors caused by malformed input rather than the snapshot contents
VALIDATION_ERROR_CODES = frozenset({
    ErrorCodes.SCHEMA_VALIDATION_ERROR,
    ErrorCodes.INVALID_FIELD_ELEMENT,
    ErrorCodes.INVALID_TREE_HEIGHT,
})


def status_code_for(exc: PoolException) -> int:
    """HTTP status for an engine exception."""
    if exc.code in VALIDATION_ERROR_CODES:
        return 422
    return 400


async def pool_error_handler(request: Request, exc: PoolException) -> JSONResponse:
    """Handle engine exceptions raised while serving a request."""
    error = exc.to_error_model()
    return JSONResponse(
        status_code=status_code_for(exc),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=error.code,
                message=error.message,
                details=error.details,
                retryable=error.retryable,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
