"""
Test fixtures package for privacy pool tests.

Usage:
    from fixtures import make_snapshot, MockProofBackend, InMemoryLedger

    def test_something():
        deposits, records = make_snapshot(3)
"""

from .common import (
    DENOMINATION,
    ROOT_HISTORY_SIZE,
    make_deposit,
    make_deposits,
    make_records,
    make_snapshot,
    CountingHasher,
    MockProofBackend,
    InMemoryLedger,
)

__all__ = [
    "DENOMINATION",
    "ROOT_HISTORY_SIZE",
    "make_deposit",
    "make_deposits",
    "make_records",
    "make_snapshot",
    "CountingHasher",
    "MockProofBackend",
    "InMemoryLedger",
]
