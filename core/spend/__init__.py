"""
Advisory spent-nullifier tracking.
"""
from .guard import LocalSpendGuard, SpentQuery

__all__ = [
    "LocalSpendGuard",
    "SpentQuery",
]
