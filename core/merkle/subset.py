"""
Commitment and Allow-List Trees
Two structurally aligned trees built from one deposit snapshot.

- Commitment tree: every deposit's commitment at its leaf index
- Allow-list tree: same positions, blocked commitments replaced by the
  zero element

Blocked leaves are substituted in place, never removed, so every deposit
keeps its position in both trees and the main tree's path_indices are
valid for the allow-list tree as well.

Known ambiguity: a genuine commitment equal to the zero element cannot be
told apart from an excluded leaf. Such records are logged, not altered.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Sequence

from core.crypto.field import ZERO_VALUE, to_fixed_hex
from core.crypto.hashing import HashPrimitive
from core.merkle.merkle_tree import IndexedTree
from core.merkle.zero_ladder import MAX_TREE_HEIGHT
from core.schemas.deposit import DepositRecord
from core.schemas.errors import NonContiguousIndexException


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreePair:
    """Commitment tree and allow-list tree over the same snapshot."""
    commitment_tree: IndexedTree
    allow_list_tree: IndexedTree

    @property
    def root(self) -> int:
        return self.commitment_tree.root

    @property
    def subset_root(self) -> int:
        return self.allow_list_tree.root


def sort_deposit_records(records: Iterable[DepositRecord]) -> list[DepositRecord]:
    """
    Sort records by leaf index and check they cover exactly 0..n-1.

    The input is not modified.

    Raises:
        NonContiguousIndexException: On a gap or a duplicate index
    """
    ordered = sorted(records, key=lambda r: r.leaf_index)
    for position, record in enumerate(ordered):
        if record.leaf_index != position:
            raise NonContiguousIndexException(
                f"Deposit leaf indices are not contiguous: expected {position}, "
                f"found {record.leaf_index}",
                position=position,
                found_index=record.leaf_index,
            )
    return ordered


def _warn_zero_commitments(ordered: Sequence[DepositRecord], zero_element: int) -> None:
    for record in ordered:
        if record.commitment == zero_element:
            logger.warning(
                f"Commitment at leaf {record.leaf_index} equals the zero element "
                f"{to_fixed_hex(zero_element)}; it is indistinguishable from an excluded leaf"
            )


def build_commitment_tree(
    records: Iterable[DepositRecord],
    height: int,
    hasher: HashPrimitive,
    zero_element: int = ZERO_VALUE,
    max_height: int = MAX_TREE_HEIGHT,
) -> IndexedTree:
    """
    Build the full deposit tree: leaf i = commitment of the record with leaf_index i.

    Raises:
        NonContiguousIndexException: If leaf indices are not exactly 0..n-1
        TreeFullException: If there are more records than 2**height
    """
    ordered = sort_deposit_records(records)
    return IndexedTree.build(
        height,
        [r.commitment for r in ordered],
        hasher,
        zero_element,
        max_height,
    )


def build_allow_list_tree(
    records: Iterable[DepositRecord],
    block_set: AbstractSet[int],
    height: int,
    hasher: HashPrimitive,
    zero_element: int = ZERO_VALUE,
    max_height: int = MAX_TREE_HEIGHT,
) -> IndexedTree:
    """
    Build the allow-list tree: blocked commitments become the zero element.

    Raises:
        NonContiguousIndexException: If leaf indices are not exactly 0..n-1
        TreeFullException: If there are more records than 2**height
    """
    ordered = sort_deposit_records(records)
    return IndexedTree.build(
        height,
        _allow_list_leaves(ordered, block_set, zero_element),
        hasher,
        zero_element,
        max_height,
    )


def _allow_list_leaves(
    ordered: Sequence[DepositRecord],
    block_set: AbstractSet[int],
    zero_element: int,
) -> list[int]:
    return [
        zero_element if r.commitment in block_set else r.commitment
        for r in ordered
    ]


def build_tree_pair(
    records: Iterable[DepositRecord],
    block_set: AbstractSet[int],
    height: int,
    hasher: HashPrimitive,
    zero_element: int = ZERO_VALUE,
    max_height: int = MAX_TREE_HEIGHT,
) -> TreePair:
    """
    Build both trees from a single sort of the snapshot.

    Raises:
        NonContiguousIndexException: If leaf indices are not exactly 0..n-1
        TreeFullException: If there are more records than 2**height
    """
    ordered = sort_deposit_records(records)
    _warn_zero_commitments(ordered, zero_element)

    commitment_tree = IndexedTree.build(
        height, [r.commitment for r in ordered], hasher, zero_element, max_height
    )
    allow_list_tree = IndexedTree.build(
        height, _allow_list_leaves(ordered, block_set, zero_element), hasher, zero_element, max_height
    )
    blocked = sum(1 for r in ordered if r.commitment in block_set)
    logger.debug(
        f"Built tree pair: deposits={len(ordered)} blocked={blocked} height={height}"
    )
    return TreePair(commitment_tree=commitment_tree, allow_list_tree=allow_list_tree)


__all__ = [
    "TreePair",
    "sort_deposit_records",
    "build_commitment_tree",
    "build_allow_list_tree",
    "build_tree_pair",
]
