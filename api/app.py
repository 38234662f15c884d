"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, trees, witness
from api.errors import generic_error_handler, pool_error_handler
from core.schemas.errors import PoolException


# Configure logging, respecting POOL_LOG_LEVEL and pool.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or pool.json, defaulting to INFO."""
    raw = os.getenv("POOL_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "pool.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Privacy Pool Witness API",
        description="""
HTTP API for blocklist-aware privacy pool withdrawals.

## Endpoints

- **GET /zeros** - Zero ladder for a tree height
- **POST /roots** - Commitment root and allow-list subset root of a snapshot
- **POST /witness** - Build the withdrawal witness (circuit input)
- **GET /health** - Health check

## Errors

Engine errors are returned as `{"ok": false, "error": {code, message, details, retryable}}`.
Malformed field elements and heights return 422, other engine errors 400.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(PoolException, pool_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(trees.router)
    app.include_router(witness.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
