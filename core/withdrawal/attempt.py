"""
Withdrawal Attempt

Drives one withdrawal through its lifecycle:

    PENDING -> WITNESS_BUILT -> PROVEN -> SUBMITTED -> CONFIRMED | REJECTED

- PENDING -> WITNESS_BUILT: local witness construction (fail-fast checks)
- WITNESS_BUILT -> PROVEN: external proof backend, run as a cancellable
  future; cancelling discards the witness and returns to PENDING
- PROVEN -> SUBMITTED -> CONFIRMED/REJECTED: external ledger
- REJECTED -> PENDING: explicit restart with a refreshed snapshot

Nothing retries on its own. A rejection whose reason indicates a stale
snapshot sets needs_refresh; the caller decides whether to restart.
"""
from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import CancelledError, Executor, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from enum import Enum
from typing import AbstractSet, Iterable, Optional, Sequence

from core.crypto.field import to_fixed_hex
from core.schemas.deposit import Deposit, DepositRecord
from core.schemas.errors import (
    InvalidStateTransitionException,
    LedgerRejectedException,
    ProofGenerationFailedException,
)
from core.schemas.witness import ProofResult, SettlementResult, WithdrawalWitness
from core.spend.guard import LocalSpendGuard
from core.withdrawal.interfaces import Ledger, ProofBackend, RejectionReason, is_stale_snapshot
from core.witness.builder import WitnessBuilder


logger = logging.getLogger(__name__)


class AttemptState(str, Enum):
    """Lifecycle states of a withdrawal attempt."""
    PENDING = "pending"
    WITNESS_BUILT = "witness_built"
    PROVEN = "proven"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


_TRANSITIONS: dict[AttemptState, frozenset[AttemptState]] = {
    AttemptState.PENDING: frozenset({AttemptState.WITNESS_BUILT}),
    AttemptState.WITNESS_BUILT: frozenset({AttemptState.PROVEN, AttemptState.PENDING}),
    AttemptState.PROVEN: frozenset({AttemptState.SUBMITTED}),
    AttemptState.SUBMITTED: frozenset({AttemptState.CONFIRMED, AttemptState.REJECTED}),
    AttemptState.CONFIRMED: frozenset(),
    AttemptState.REJECTED: frozenset({AttemptState.PENDING}),
}


def check_root_freshness(ledger: Ledger, witness: WithdrawalWitness) -> None:
    """
    Fail before proving if the ledger does not know the witness root.

    Raises:
        LedgerRejectedException: With the unknown-root reason, retryable
    """
    if not ledger.is_known_root(witness.root):
        raise LedgerRejectedException(
            RejectionReason.UNKNOWN_ROOT.value,
            retryable=True,
            details={"root": to_fixed_hex(witness.root)},
        )


class WithdrawalAttempt:
    """
    State machine for a single withdrawal.

    Example:
        >>> attempt = WithdrawalAttempt()
        >>> attempt.build_witness(builder, deposit, records, block_set, recipient=addr)
        >>> attempt.prove(backend)
        >>> attempt.submit(ledger, spend_guard)
        >>> attempt.state
        <AttemptState.CONFIRMED: 'confirmed'>
    """

    def __init__(self, attempt_id: str | None = None) -> None:
        self.attempt_id = attempt_id or uuid.uuid4().hex[:12]
        self._state = AttemptState.PENDING
        self._lock = threading.Lock()
        self._future: Optional[Future] = None
        self.witness: Optional[WithdrawalWitness] = None
        self.proof_result: Optional[ProofResult] = None
        self.settlement: Optional[SettlementResult] = None
        self.rejection: Optional[LedgerRejectedException] = None

    @property
    def state(self) -> AttemptState:
        return self._state

    @property
    def needs_refresh(self) -> bool:
        """True when rejected for a reason that a fresher snapshot can fix."""
        return (
            self._state is AttemptState.REJECTED
            and self.rejection is not None
            and self.rejection.retryable
        )

    # ------------------------------------------------------------------
    # PENDING -> WITNESS_BUILT
    # ------------------------------------------------------------------

    def build_witness(
        self,
        builder: WitnessBuilder,
        deposit: Deposit,
        deposit_records: Sequence[DepositRecord],
        block_set: AbstractSet[int] | Iterable[int],
        recipient: int,
        relayer: int = 0,
        fee: int = 0,
        refund: int = 0,
        denomination: int | None = None,
    ) -> WithdrawalWitness:
        """
        Build the witness; validation errors leave the attempt PENDING.
        """
        self._require(AttemptState.PENDING, AttemptState.WITNESS_BUILT)
        witness = builder.generate_withdrawal_witness(
            deposit,
            deposit_records,
            block_set,
            recipient=recipient,
            relayer=relayer,
            fee=fee,
            refund=refund,
            denomination=denomination,
        )
        self.witness = witness
        self._transition(AttemptState.WITNESS_BUILT)
        return witness

    # ------------------------------------------------------------------
    # WITNESS_BUILT -> PROVEN
    # ------------------------------------------------------------------

    def start_proving(self, backend: ProofBackend, executor: Executor) -> Future:
        """
        Submit proof generation as an independent unit of work.

        Returns:
            The future running backend.prove(witness)
        """
        self._require(AttemptState.WITNESS_BUILT, AttemptState.PROVEN)
        with self._lock:
            if self._future is not None:
                raise InvalidStateTransitionException(self._state.value, "proving (already in flight)")
            self._future = executor.submit(backend.prove, self.witness)
        logger.info(f"Withdrawal attempt {self.attempt_id}: proof generation started")
        return self._future

    def finish_proving(self, timeout: float | None = None) -> ProofResult:
        """
        Wait for the in-flight proof.

        A timeout leaves the proof in flight. A backend failure leaves the
        attempt in WITNESS_BUILT so the caller may prove again.

        Raises:
            ProofGenerationFailedException: If the backend failed
            CancelledError: If the proof was cancelled (witness discarded)
            TimeoutError: If timeout elapsed first
        """
        future = self._future
        if future is None:
            raise InvalidStateTransitionException(self._state.value, AttemptState.PROVEN.value)

        try:
            result = future.result(timeout=timeout)
        except CancelledError:
            self._discard(future)
            raise
        except FutureTimeoutError:
            raise
        except ProofGenerationFailedException:
            self._future = None
            raise
        except Exception as e:
            self._future = None
            raise ProofGenerationFailedException(
                f"Proof backend failed: {e}",
                details={"type": type(e).__name__},
            ) from e

        self._future = None
        self.proof_result = result
        self._transition(AttemptState.PROVEN)
        return result

    def cancel_proving(self) -> bool:
        """
        Cancel an in-flight proof that has not started running.

        On success the witness is discarded and the attempt is PENDING again.
        """
        future = self._future
        if future is None or not future.cancel():
            return False
        self._discard(future)
        return True

    def prove(self, backend: ProofBackend) -> ProofResult:
        """Run the proof synchronously on a dedicated worker."""
        with ThreadPoolExecutor(max_workers=1) as pool:
            self.start_proving(backend, pool)
            return self.finish_proving()

    # ------------------------------------------------------------------
    # PROVEN -> SUBMITTED -> CONFIRMED | REJECTED
    # ------------------------------------------------------------------

    def submit(self, ledger: Ledger, spend_guard: LocalSpendGuard | None = None) -> SettlementResult:
        """
        Submit the proof for settlement.

        When a spend guard is given it is consulted first (advisory) and
        updated after confirmation.

        Raises:
            AlreadySpentException: If the guard knows the note is spent
                (attempt stays PROVEN)
            LedgerRejectedException: If the ledger rejects; reason verbatim
        """
        self._require(AttemptState.PROVEN, AttemptState.SUBMITTED)
        nullifier_hash = self.witness.nullifier_hash
        if spend_guard is not None:
            spend_guard.check_not_spent(nullifier_hash)

        self._transition(AttemptState.SUBMITTED)
        result = ledger.submit(
            self.proof_result.proof,
            list(self.proof_result.public_signals),
        )
        self.settlement = result

        if result.ok:
            self._transition(AttemptState.CONFIRMED)
            if spend_guard is not None:
                spend_guard.mark_spent(nullifier_hash)
            return result

        reason = result.reason or "Rejected without reason"
        self.rejection = LedgerRejectedException(reason, retryable=is_stale_snapshot(reason))
        self._transition(AttemptState.REJECTED)
        logger.warning(f"Withdrawal attempt {self.attempt_id} rejected: {reason}")
        raise self.rejection

    def restart(self) -> None:
        """Return a rejected attempt to PENDING, dropping all derived values."""
        self._require(AttemptState.REJECTED, AttemptState.PENDING)
        self.witness = None
        self.proof_result = None
        self.settlement = None
        self.rejection = None
        self._transition(AttemptState.PENDING)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _discard(self, future: Future) -> None:
        # Both the canceller and a blocked waiter land here; only the first discards.
        with self._lock:
            if self._future is not future or self._state is not AttemptState.WITNESS_BUILT:
                return
            self._future = None
            self.witness = None
            self._state = AttemptState.PENDING
        logger.info(f"Withdrawal attempt {self.attempt_id}: proof cancelled, witness discarded")

    def _require(self, current: AttemptState, target: AttemptState) -> None:
        if self._state is not current:
            raise InvalidStateTransitionException(self._state.value, target.value)

    def _transition(self, target: AttemptState) -> None:
        with self._lock:
            if target not in _TRANSITIONS[self._state]:
                raise InvalidStateTransitionException(self._state.value, target.value)
            previous = self._state
            self._state = target
        logger.debug(f"Withdrawal attempt {self.attempt_id}: {previous.value} -> {target.value}")

    def __repr__(self) -> str:
        return f"WithdrawalAttempt(id={self.attempt_id!r}, state={self._state.value})"


__all__ = [
    "AttemptState",
    "WithdrawalAttempt",
    "check_root_freshness",
]
