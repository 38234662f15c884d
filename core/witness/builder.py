"""
Withdrawal Witness Builder

Combines a deposit note with the deposit snapshot and a blocklist snapshot
to produce the full public/private input vector for the withdrawal proof.

Validation order (all before any proof work):
1. Deposit present in the snapshot        -> DepositNotFoundException
2. Deposit not on the blocklist           -> BlockedDepositException
3. fee <= denomination                    -> FeeExceedsValueException
4. refund == 0 unless refunds are allowed -> NonZeroRefundException
5. Both trees built, paths derived, direction bits cross-checked

The builder holds no mutable state: concurrent calls over independent
snapshots need no coordination.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, Sequence

from core.config.runtime import PoolConfig
from core.crypto.field import to_fixed_hex
from core.crypto.hashing import HashPrimitive
from core.merkle.subset import TreePair, build_tree_pair
from core.schemas.deposit import Deposit, DepositRecord
from core.schemas.errors import (
    BlockedDepositException,
    DepositNotFoundException,
    FeeExceedsValueException,
    InvariantViolationException,
    NonZeroRefundException,
)
from core.schemas.witness import WithdrawalWitness


logger = logging.getLogger(__name__)


class WitnessBuilder:
    """
    Builds withdrawal witnesses for one pool deployment.

    Example:
        >>> builder = WitnessBuilder(hasher, PoolConfig(tree_height=20))
        >>> witness = builder.generate_withdrawal_witness(
        ...     deposit, records, block_set, recipient=addr, relayer=relayer, fee=0, refund=0,
        ... )
        >>> witness.to_circuit_input()["subsetRoot"]
    """

    def __init__(self, hasher: HashPrimitive, config: PoolConfig | None = None) -> None:
        self.hasher = hasher
        self.config = config or PoolConfig()
        self.config.validate()

    def build_trees(
        self,
        deposit_records: Iterable[DepositRecord],
        block_set: AbstractSet[int],
    ) -> TreePair:
        """Build the commitment and allow-list trees at the configured height."""
        return build_tree_pair(
            deposit_records,
            block_set,
            self.config.tree_height,
            self.hasher,
            self.config.zero_element,
            self.config.max_tree_height,
        )

    def validate_withdrawal(
        self,
        deposit: Deposit,
        deposit_records: Sequence[DepositRecord],
        block_set: AbstractSet[int],
        fee: int,
        refund: int,
        denomination: int | None = None,
    ) -> DepositRecord:
        """
        Run the local checks that need no tree.

        Returns:
            The deposit's record in the snapshot

        Raises:
            DepositNotFoundException, BlockedDepositException,
            FeeExceedsValueException, NonZeroRefundException
        """
        record = next(
            (r for r in deposit_records if r.commitment == deposit.commitment),
            None,
        )
        if record is None:
            raise DepositNotFoundException(commitment=deposit.commitment_hex)

        if deposit.commitment in block_set:
            raise BlockedDepositException(commitment=deposit.commitment_hex)

        if denomination is None:
            denomination = self.config.denomination
        if fee < 0 or fee > denomination:
            raise FeeExceedsValueException(fee=fee, denomination=denomination)

        if refund < 0:
            raise NonZeroRefundException("Refund cannot be negative", refund=refund)
        if refund != 0 and not self.config.refund_allowed:
            raise NonZeroRefundException(refund=refund)

        return record

    def generate_withdrawal_witness(
        self,
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
        Assemble the withdrawal witness for a deposit.

        Args:
            deposit: The withdrawing depositor's note
            deposit_records: Snapshot of the deposit history
            block_set: Snapshot of blocked commitments
            recipient: Recipient address as a field element
            relayer: Relayer address as a field element
            fee: Relayer fee, at most the denomination
            refund: Refund amount (zero unless the pool allows refunds)
            denomination: Pool denomination; defaults to the configured value

        Returns:
            WithdrawalWitness ready for the proof backend

        Raises:
            DepositNotFoundException: Commitment not in the snapshot
            BlockedDepositException: Commitment is blocked
            FeeExceedsValueException: fee > denomination
            NonZeroRefundException: refund != 0 where refunds are disallowed
            NonContiguousIndexException: Snapshot leaf indices have gaps or duplicates
            TreeFullException: Snapshot exceeds tree capacity
            InvariantViolationException: Trees disagree on direction bits
        """
        records = list(deposit_records)
        blocked = block_set if isinstance(block_set, (set, frozenset)) else frozenset(block_set)

        record = self.validate_withdrawal(
            deposit, records, blocked, fee, refund, denomination
        )
        leaf_index = record.leaf_index

        pair = self.build_trees(records, blocked)
        main_path = pair.commitment_tree.path(leaf_index)
        subset_path = pair.allow_list_tree.path(leaf_index)
        if subset_path.path_indices != main_path.path_indices:
            raise InvariantViolationException(
                "Allow-list path direction bits differ from commitment tree path",
                details={"leaf_index": leaf_index},
            )

        witness = WithdrawalWitness(
            root=pair.root,
            subset_root=pair.subset_root,
            nullifier_hash=deposit.nullifier_hash(self.hasher),
            recipient=recipient,
            relayer=relayer,
            fee=fee,
            refund=refund,
            nullifier=deposit.nullifier,
            secret=deposit.secret,
            path_elements=main_path.path_elements,
            path_indices=main_path.path_indices,
            subset_path_elements=subset_path.path_elements,
        )
        logger.debug(
            f"Built withdrawal witness: leaf={leaf_index} "
            f"root={to_fixed_hex(witness.root)} subset_root={to_fixed_hex(witness.subset_root)}"
        )
        return witness


def generate_withdrawal_witness(
    deposit: Deposit,
    deposit_records: Sequence[DepositRecord],
    block_set: AbstractSet[int] | Iterable[int],
    recipient: int,
    relayer: int,
    fee: int,
    refund: int,
    denomination: int,
    hasher: HashPrimitive,
    config: PoolConfig | None = None,
) -> WithdrawalWitness:
    """Function form of WitnessBuilder.generate_withdrawal_witness."""
    return WitnessBuilder(hasher, config).generate_withdrawal_witness(
        deposit,
        deposit_records,
        block_set,
        recipient=recipient,
        relayer=relayer,
        fee=fee,
        refund=refund,
        denomination=denomination,
    )


__all__ = [
    "WitnessBuilder",
    "generate_withdrawal_witness",
]
