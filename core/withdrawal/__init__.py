"""
Withdrawal lifecycle and external collaborator interfaces.
"""
from .interfaces import (
    STALE_SNAPSHOT_REASONS,
    DepositFeed,
    Ledger,
    ProofBackend,
    RejectionReason,
    is_stale_snapshot,
)
from .attempt import AttemptState, WithdrawalAttempt, check_root_freshness

__all__ = [
    "STALE_SNAPSHOT_REASONS",
    "DepositFeed",
    "Ledger",
    "ProofBackend",
    "RejectionReason",
    "is_stale_snapshot",
    "AttemptState",
    "WithdrawalAttempt",
    "check_root_freshness",
]
