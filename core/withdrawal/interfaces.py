"""
External Collaborators

Capability interfaces for the systems the engine talks to but does not
implement: the proof backend, the ledger, and the deposit feed.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable

from core.schemas.deposit import DepositRecord
from core.schemas.witness import ProofResult, SettlementResult, WithdrawalWitness


class RejectionReason(str, Enum):
    """Rejection messages as emitted by the ledger contract."""

    COMMITMENT_SUBMITTED = "The commitment has been submitted"
    NOTE_ALREADY_SPENT = "The note has been already spent"
    UNKNOWN_ROOT = "Cannot find your merkle root"
    INVALID_PROOF = "Invalid withdraw proof"
    FEE_EXCEEDS_VALUE = "Fee exceeds transfer value"
    NON_ZERO_REFUND = "Refund value is supposed to be zero for ETH instance"


# Reasons that mean the caller's snapshot is behind the ledger
STALE_SNAPSHOT_REASONS: frozenset[str] = frozenset({
    RejectionReason.UNKNOWN_ROOT.value,
})


def is_stale_snapshot(reason: str | None) -> bool:
    """True when a rejection should prompt refresh-and-retry."""
    return reason in STALE_SNAPSHOT_REASONS


@runtime_checkable
class ProofBackend(Protocol):
    """Zero-knowledge prover and verifier for the withdrawal circuit."""

    def prove(self, witness: WithdrawalWitness) -> ProofResult:
        ...

    def verify(self, verification_key: Any, public_signals: list[int], proof: dict[str, Any]) -> bool:
        ...


@runtime_checkable
class Ledger(Protocol):
    """Settlement layer holding deposits, known roots and spent nullifiers."""

    def submit(self, proof: dict[str, Any], public_signals: list[int]) -> SettlementResult:
        ...

    def is_spent(self, nullifier_hash: int) -> bool:
        ...

    def is_spent_array(self, nullifier_hashes: list[int]) -> list[bool]:
        ...

    def is_known_root(self, root: int) -> bool:
        ...


@runtime_checkable
class DepositFeed(Protocol):
    """Source of the deposit history snapshot."""

    def fetch_deposits(self) -> list[DepositRecord]:
        ...


__all__ = [
    "RejectionReason",
    "STALE_SNAPSHOT_REASONS",
    "is_stale_snapshot",
    "ProofBackend",
    "Ledger",
    "DepositFeed",
]
