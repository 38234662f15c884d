"""
Local Spend Guard

Advisory client-side mirror of the ledger's spent-nullifier state, used to
fail fast before submitting a withdrawal that cannot settle.

The ledger is authoritative and this cache may be stale: a pass from
check_not_spent is never a guarantee. Updates swap an immutable set under
a lock, so readers see either the old or the new set, never a mix.
"""
from __future__ import annotations

import logging
import threading
from typing import Iterable, Protocol

from core.crypto.field import to_fixed_hex
from core.schemas.errors import AlreadySpentException


logger = logging.getLogger(__name__)


class SpentQuery(Protocol):
    """The slice of the ledger interface the guard refreshes from."""

    def is_spent_array(self, nullifier_hashes: list[int]) -> list[bool]:
        ...


class LocalSpendGuard:
    """
    Thread-safe cache of nullifier hashes known to be spent.

    Example:
        >>> guard = LocalSpendGuard()
        >>> guard.refresh(ledger, [h1, h2])
        >>> guard.check_not_spent(h1)  # raises AlreadySpentException if spent
    """

    def __init__(self, spent: Iterable[int] = ()) -> None:
        self._lock = threading.Lock()
        self._spent: frozenset[int] = frozenset(spent)

    def check_not_spent(self, nullifier_hash: int) -> None:
        """
        Raises:
            AlreadySpentException: If the hash is cached as spent
        """
        if nullifier_hash in self._spent:
            raise AlreadySpentException(nullifier_hash=to_fixed_hex(nullifier_hash))

    def is_known_spent(self, nullifier_hash: int) -> bool:
        return nullifier_hash in self._spent

    def mark_spent(self, nullifier_hash: int) -> None:
        """Record a spend learned from a confirmed withdrawal."""
        with self._lock:
            self._spent = self._spent | {nullifier_hash}

    def replace(self, spent: Iterable[int]) -> None:
        """Replace the whole cache in one step."""
        new_spent = frozenset(spent)
        with self._lock:
            self._spent = new_spent

    def refresh(self, ledger: SpentQuery, nullifier_hashes: Iterable[int]) -> int:
        """
        Query the ledger for a batch of hashes and update their entries.

        Hashes the ledger reports as unspent are removed from the cache,
        hashes it reports as spent are added. Entries outside the batch
        are left untouched.

        Returns:
            Number of hashes in the batch reported spent
        """
        batch = list(nullifier_hashes)
        if not batch:
            return 0
        flags = ledger.is_spent_array(batch)
        if len(flags) != len(batch):
            raise ValueError(
                f"Ledger answered {len(flags)} spent flags for {len(batch)} hashes"
            )

        spent = {h for h, flag in zip(batch, flags) if flag}
        unspent = set(batch) - spent
        with self._lock:
            self._spent = (self._spent - unspent) | spent

        logger.debug(f"Refreshed spend guard: queried={len(batch)} spent={len(spent)}")
        return len(spent)

    def snapshot(self) -> frozenset[int]:
        return self._spent

    def __contains__(self, nullifier_hash: object) -> bool:
        return nullifier_hash in self._spent

    def __len__(self) -> int:
        return len(self._spent)


__all__ = [
    "SpentQuery",
    "LocalSpendGuard",
]
