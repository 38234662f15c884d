"""
Common test fixtures shared by all modules.

Provides factory functions and test doubles for the withdrawal engine:
- Deposit notes and deposit record snapshots
- CountingHasher (call-counting hash primitive)
- MockProofBackend (predicate-driven prover/verifier)
- InMemoryLedger (settlement double with the ledger's rejection reasons)
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable, Iterable, Optional, Sequence

from core.crypto.field import to_fixed_hex
from core.crypto.hashing import Sha256FieldHasher, sha256_to_field
from core.schemas.deposit import Deposit, DepositRecord
from core.schemas.witness import ProofResult, SettlementResult, WithdrawalWitness
from core.withdrawal.interfaces import RejectionReason


DENOMINATION = 10**18

# Ledger root history length, matching the deployed pool contract
ROOT_HISTORY_SIZE = 30


# =============================================================================
# Deposit Factories
# =============================================================================

def make_deposit(seed: int = 0, hasher=None) -> Deposit:
    """
    Create a deterministic deposit note.

    Args:
        seed: Distinct seeds give distinct notes
        hasher: Hash primitive (default: Sha256FieldHasher)
    """
    hasher = hasher or Sha256FieldHasher()
    return Deposit.create(
        hasher,
        nullifier=sha256_to_field(seed, 1) >> 8,
        secret=sha256_to_field(seed, 2) >> 8,
    )


def make_deposits(count: int, hasher=None) -> list[Deposit]:
    """Create count distinct deposit notes."""
    return [make_deposit(seed, hasher) for seed in range(count)]


def make_records(deposits: Sequence[Deposit]) -> list[DepositRecord]:
    """Position deposits at leaf indices 0..n-1 in list order."""
    return [
        DepositRecord(leaf_index=i, commitment=d.commitment)
        for i, d in enumerate(deposits)
    ]


def make_snapshot(count: int = 3, hasher=None) -> tuple[list[Deposit], list[DepositRecord]]:
    """Create deposits plus their records."""
    deposits = make_deposits(count, hasher)
    return deposits, make_records(deposits)


# =============================================================================
# Hash Primitive Doubles
# =============================================================================

class CountingHasher:
    """
    SHA-256 field hasher that counts calls.

    Instances hash by identity, so a fresh instance never hits a zero
    ladder cached for another one.
    """

    def __init__(self, name: str = "counting-sha256") -> None:
        self.name = name
        self._inner = Sha256FieldHasher()
        self.hash1_calls = 0
        self.hash2_calls = 0

    @property
    def calls(self) -> int:
        return self.hash1_calls + self.hash2_calls

    def hash1(self, x: int) -> int:
        self.hash1_calls += 1
        return self._inner.hash1(x)

    def hash2(self, x: int, y: int) -> int:
        self.hash2_calls += 1
        return self._inner.hash2(x, y)


# =============================================================================
# Proof Backend Double
# =============================================================================

def _binding(public_signals: Iterable[int]) -> str:
    return to_fixed_hex(sha256_to_field(*(int(s) for s in public_signals)))


class MockProofBackend:
    """
    Proof backend whose proofs bind the public signals they were made for.

    Args:
        predicate: Decides whether a witness is provable (default: always)
        gate: When set, prove() blocks until the event is set
    """

    verification_key = {"protocol": "mock", "curve": "bn128"}

    def __init__(
        self,
        predicate: Optional[Callable[[WithdrawalWitness], bool]] = None,
        gate: Optional[threading.Event] = None,
    ) -> None:
        self.predicate = predicate or (lambda witness: True)
        self.gate = gate
        self.prove_calls = 0
        self.started = threading.Event()

    def prove(self, witness: WithdrawalWitness) -> ProofResult:
        self.prove_calls += 1
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if not self.predicate(witness):
            raise RuntimeError("Witness does not satisfy the circuit")
        signals = witness.public_signals()
        return ProofResult(
            proof={"protocol": "mock", "binding": _binding(signals)},
            public_signals=tuple(signals),
        )

    def verify(self, verification_key: Any, public_signals: list[int], proof: dict[str, Any]) -> bool:
        return proof.get("binding") == _binding(public_signals)


# =============================================================================
# Ledger Double
# =============================================================================

class InMemoryLedger:
    """
    Settlement double checking withdrawals in the pool contract's order:
    fee, refund, spent nullifier, known root, proof.
    """

    def __init__(
        self,
        roots: Iterable[int] = (),
        backend: Optional[MockProofBackend] = None,
        denomination: int = DENOMINATION,
        refund_allowed: bool = False,
    ) -> None:
        self.backend = backend or MockProofBackend()
        self.denomination = denomination
        self.refund_allowed = refund_allowed
        self.roots: deque[int] = deque(roots, maxlen=ROOT_HISTORY_SIZE)
        self.spent: set[int] = set()
        self.submissions: list[list[int]] = []

    def add_root(self, root: int) -> None:
        self.roots.append(root)

    def is_known_root(self, root: int) -> bool:
        return root != 0 and root in self.roots

    def is_spent(self, nullifier_hash: int) -> bool:
        return nullifier_hash in self.spent

    def is_spent_array(self, nullifier_hashes: list[int]) -> list[bool]:
        return [h in self.spent for h in nullifier_hashes]

    def submit(self, proof: dict[str, Any], public_signals: list[int]) -> SettlementResult:
        self.submissions.append(list(public_signals))
        root, _subset_root, nullifier_hash, _recipient, _relayer, fee, refund = public_signals

        if fee > self.denomination:
            return self._reject(RejectionReason.FEE_EXCEEDS_VALUE)
        if refund != 0 and not self.refund_allowed:
            return self._reject(RejectionReason.NON_ZERO_REFUND)
        if nullifier_hash in self.spent:
            return self._reject(RejectionReason.NOTE_ALREADY_SPENT)
        if not self.is_known_root(root):
            return self._reject(RejectionReason.UNKNOWN_ROOT)
        if not self.backend.verify(self.backend.verification_key, list(public_signals), proof):
            return self._reject(RejectionReason.INVALID_PROOF)

        self.spent.add(nullifier_hash)
        return SettlementResult(ok=True, tx_id=f"0x{len(self.submissions):064x}")

    @staticmethod
    def _reject(reason: RejectionReason) -> SettlementResult:
        return SettlementResult(ok=False, reason=reason.value)
