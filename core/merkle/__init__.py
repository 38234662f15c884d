"""
Merkle Trees
Fixed-height indexed trees, the zero ladder, and the commitment /
allow-list tree pair.

This module provides:
- ZeroLadder / get_zero_ladder: cached empty-subtree hashes
- IndexedTree: positionally-addressed tree with incremental append
- MerklePath / verify_merkle_path: inclusion paths and the path-root law
- build_commitment_tree / build_allow_list_tree / build_tree_pair

Tree Rules:
1. Leaf i lives at position i in every tree built from the same snapshot
2. Empty and excluded leaves both hold the zero element
3. Parent hashing: hash2(left, right) with the injected primitive

Usage:
    from core.merkle import build_tree_pair, verify_merkle_path

    pair = build_tree_pair(records, block_set, height=20, hasher=hasher)
    path = pair.commitment_tree.path(leaf_index)
    assert verify_merkle_path(commitment, path, pair.root, hasher)
"""
from .zero_ladder import (
    MAX_TREE_HEIGHT,
    ZeroLadder,
    clear_zero_ladder_cache,
    compute_zero_ladder,
    format_solidity_zeros,
    get_zero_ladder,
    validate_height,
)

from .merkle_tree import (
    IndexedTree,
    MerklePath,
    compute_root_from_path,
    verify_merkle_path,
)

from .subset import (
    TreePair,
    build_allow_list_tree,
    build_commitment_tree,
    build_tree_pair,
    sort_deposit_records,
)


__all__ = [
    # Zero ladder
    "MAX_TREE_HEIGHT",
    "ZeroLadder",
    "clear_zero_ladder_cache",
    "compute_zero_ladder",
    "format_solidity_zeros",
    "get_zero_ladder",
    "validate_height",
    # Indexed tree
    "IndexedTree",
    "MerklePath",
    "compute_root_from_path",
    "verify_merkle_path",
    # Tree pair
    "TreePair",
    "build_allow_list_tree",
    "build_commitment_tree",
    "build_tree_pair",
    "sort_deposit_records",
]
