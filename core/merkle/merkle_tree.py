"""
Indexed Merkle Tree
Fixed-height, positionally-addressed Merkle tree over field elements.

This module provides:
- MerklePath: sibling values and direction bits for one leaf
- IndexedTree: append-only tree with O(height) incremental updates
- compute_root_from_path / verify_merkle_path: the path-root law

Tree Rules:
1. Capacity is 2**height; position i is fixed for the life of the tree
2. Unset positions equal the zero element
3. node(l, i) = hash2(node(l-1, 2i), node(l-1, 2i+1))
4. Empty subtrees resolve from the zero ladder, never materialized
5. path_indices[level] is bit `level` of the leaf index (LSB first),
   0 = current node is the left child, 1 = right child

Only the populated prefix of each layer is stored. A tree holding n leaves
keeps about 2n nodes regardless of height.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from core.crypto.field import ZERO_VALUE
from core.crypto.hashing import HashPrimitive
from core.merkle.zero_ladder import MAX_TREE_HEIGHT, ZeroLadder, get_zero_ladder
from core.schemas.errors import IndexOutOfRangeException, TreeFullException


@dataclass(frozen=True)
class MerklePath:
    """
    Inclusion path for a single leaf position.

    Attributes:
        leaf_index: Position of the leaf the path was derived for
        path_elements: Sibling value at each level, bottom-up
        path_indices: Direction bit at each level, bottom-up
    """
    leaf_index: int
    path_elements: tuple[int, ...]
    path_indices: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.path_elements) != len(self.path_indices):
            raise ValueError(
                f"Path length mismatch: {len(self.path_elements)} elements, "
                f"{len(self.path_indices)} indices"
            )

    @property
    def height(self) -> int:
        return len(self.path_elements)


class IndexedTree:
    """
    Fixed-capacity Merkle tree addressed by leaf position.

    Example:
        >>> tree = IndexedTree.build(4, [c0, c1, c2], hasher)
        >>> path = tree.path(2)
        >>> verify_merkle_path(c2, path, tree.root, hasher)
        True
    """

    def __init__(
        self,
        height: int,
        hasher: HashPrimitive,
        zero_element: int = ZERO_VALUE,
        leaves: Iterable[int] = (),
        max_height: int = MAX_TREE_HEIGHT,
    ) -> None:
        self._ladder: ZeroLadder = get_zero_ladder(hasher, zero_element, height, max_height)
        self._height = height
        self._hasher = hasher
        self._zero_element = zero_element
        # _layers[0] holds the populated leaves, _layers[l] the populated nodes at level l
        self._layers: list[list[int]] = [[] for _ in range(height + 1)]

        initial = list(leaves)
        if initial:
            self._check_capacity(len(initial))
            self._layers[0] = initial
            self._rebuild()

    @classmethod
    def build(
        cls,
        height: int,
        ordered_leaves: Sequence[int],
        hasher: HashPrimitive,
        zero_element: int = ZERO_VALUE,
        max_height: int = MAX_TREE_HEIGHT,
    ) -> "IndexedTree":
        """
        Build a tree from leaves in position order.

        Positions beyond len(ordered_leaves) are the zero element.

        Raises:
            TreeFullException: If there are more leaves than 2**height
            InvalidTreeHeightException: If height exceeds max_height
        """
        return cls(height, hasher, zero_element, ordered_leaves, max_height)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def height(self) -> int:
        return self._height

    @property
    def capacity(self) -> int:
        return 1 << self._height

    @property
    def zero_element(self) -> int:
        return self._zero_element

    @property
    def zeros(self) -> ZeroLadder:
        return self._ladder

    @property
    def leaves(self) -> tuple[int, ...]:
        """Populated leaves in position order."""
        return tuple(self._layers[0])

    @property
    def root(self) -> int:
        """Current root; the empty-tree root when nothing is populated."""
        top = self._layers[self._height]
        if not top:
            return self._ladder[self._height]
        return top[0]

    def __len__(self) -> int:
        return len(self._layers[0])

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, leaf: int) -> int:
        """
        Insert a leaf at the first unused position.

        Only the nodes on the new leaf's path to the root are recomputed.

        Returns:
            The position the leaf was written to

        Raises:
            TreeFullException: If all 2**height positions are used
        """
        self._check_capacity(len(self) + 1)
        index = len(self._layers[0])
        self._layers[0].append(leaf)

        node_index = index
        for level in range(1, self._height + 1):
            node_index >>= 1
            value = self._hash_children(level - 1, node_index)
            layer = self._layers[level]
            if node_index < len(layer):
                layer[node_index] = value
            else:
                layer.append(value)
        return index

    def extend(self, leaves: Iterable[int]) -> None:
        """
        Append several leaves, rebuilding populated nodes once.

        Raises:
            TreeFullException: If the leaves do not fit; the tree is unchanged
        """
        new_leaves = list(leaves)
        if not new_leaves:
            return
        self._check_capacity(len(self) + len(new_leaves))
        self._layers[0].extend(new_leaves)
        self._rebuild()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def leaf(self, index: int) -> int:
        """Leaf value at a position (zero element when unpopulated)."""
        self._check_index(index)
        return self._node(0, index)

    def index_of(self, leaf: int) -> int:
        """Position of the first populated leaf equal to leaf, or -1."""
        try:
            return self._layers[0].index(leaf)
        except ValueError:
            return -1

    def path(self, index: int) -> MerklePath:
        """
        Derive the inclusion path for a leaf position.

        Paths for unpopulated positions are valid and prove the zero element.

        Raises:
            IndexOutOfRangeException: If index is negative or >= 2**height
        """
        self._check_index(index)

        path_elements: list[int] = []
        path_indices: list[int] = []
        node_index = index
        for level in range(self._height):
            path_indices.append(node_index & 1)
            path_elements.append(self._node(level, node_index ^ 1))
            node_index >>= 1

        return MerklePath(
            leaf_index=index,
            path_elements=tuple(path_elements),
            path_indices=tuple(path_indices),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _node(self, level: int, index: int) -> int:
        layer = self._layers[level]
        if index < len(layer):
            return layer[index]
        return self._ladder[level]

    def _hash_children(self, child_level: int, parent_index: int) -> int:
        left = self._node(child_level, parent_index * 2)
        right = self._node(child_level, parent_index * 2 + 1)
        return self._hasher.hash2(left, right)

    def _rebuild(self) -> None:
        for level in range(1, self._height + 1):
            below = len(self._layers[level - 1])
            width = (below + 1) // 2
            self._layers[level] = [
                self._hash_children(level - 1, i) for i in range(width)
            ]

    def _check_capacity(self, required: int) -> None:
        if required > self.capacity:
            raise TreeFullException(
                f"Tree of height {self._height} holds at most {self.capacity} leaves, "
                f"{required} requested",
                capacity=self.capacity,
            )

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.capacity:
            raise IndexOutOfRangeException(
                f"Leaf index {index} out of range for tree of capacity {self.capacity}",
                leaf_index=index,
            )

    def __repr__(self) -> str:
        return f"IndexedTree(height={self._height}, leaves={len(self)})"


def compute_root_from_path(leaf: int, path: MerklePath, hasher: HashPrimitive) -> int:
    """
    Fold a leaf with its path back up to a root.

    path_indices select the side: 0 hashes (current, sibling),
    1 hashes (sibling, current).
    """
    current = leaf
    for sibling, bit in zip(path.path_elements, path.path_indices):
        if bit == 0:
            current = hasher.hash2(current, sibling)
        else:
            current = hasher.hash2(sibling, current)
    return current


def verify_merkle_path(leaf: int, path: MerklePath, root: int, hasher: HashPrimitive) -> bool:
    """
    Verify a leaf is included under root at the path's position.

    Returns:
        True if folding the path reproduces root
    """
    if any(bit not in (0, 1) for bit in path.path_indices):
        return False
    return compute_root_from_path(leaf, path, hasher) == root


__all__ = [
    "MerklePath",
    "IndexedTree",
    "compute_root_from_path",
    "verify_merkle_path",
]
