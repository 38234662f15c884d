"""API route handlers."""

from api.routes import health, trees, witness

__all__ = ["health", "trees", "witness"]
