"""
Privacy Pool API (FastAPI)

HTTP API for tree roots and withdrawal witnesses:
- GET /zeros - Zero ladder for a tree height
- POST /roots - Commitment and subset roots for a snapshot
- POST /witness - Build a withdrawal witness
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
