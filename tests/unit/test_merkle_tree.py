"""
Indexed Merkle Tree Unit Tests
Tests for core/merkle/merkle_tree.py

Tests:
1. Path-root law - every populated index folds back to the root
2. Determinism - same ordered leaves give the same root
3. Incremental append matches bulk build
4. Empty positions resolve to the zero ladder
5. Capacity and index range errors
"""
import pytest

from core.crypto.field import ZERO_VALUE
from core.crypto.hashing import sha256_to_field
from core.merkle.merkle_tree import (
    IndexedTree,
    MerklePath,
    compute_root_from_path,
    verify_merkle_path,
)
from core.merkle.zero_ladder import get_zero_ladder
from core.schemas.errors import IndexOutOfRangeException, TreeFullException


def leaves(count: int) -> list[int]:
    return [sha256_to_field(i, 77) for i in range(count)]


def naive_root(height: int, values: list[int], hasher, zero=ZERO_VALUE) -> int:
    """Hash the full 2**height layer level by level."""
    layer = values + [zero] * ((1 << height) - len(values))
    for _ in range(height):
        layer = [hasher.hash2(layer[i], layer[i + 1]) for i in range(0, len(layer), 2)]
    return layer[0]


class TestPathRootLaw:
    """Reconstructing from path(i) reproduces the root."""

    @pytest.mark.parametrize("height,count", [(1, 1), (1, 2), (3, 5), (4, 16), (6, 9)])
    def test_every_index(self, hasher, height, count):
        values = leaves(count)
        tree = IndexedTree.build(height, values, hasher)

        for i, leaf in enumerate(values):
            path = tree.path(i)
            assert compute_root_from_path(leaf, path, hasher) == tree.root
            assert verify_merkle_path(leaf, path, tree.root, hasher)

    def test_empty_position_proves_zero(self, hasher):
        tree = IndexedTree.build(3, leaves(2), hasher)
        path = tree.path(5)

        assert verify_merkle_path(ZERO_VALUE, path, tree.root, hasher)

    def test_wrong_leaf_fails(self, hasher):
        values = leaves(4)
        tree = IndexedTree.build(3, values, hasher)

        assert not verify_merkle_path(values[1], tree.path(0), tree.root, hasher)

    def test_invalid_bit_fails(self, hasher):
        values = leaves(2)
        tree = IndexedTree.build(2, values, hasher)
        path = tree.path(0)
        bad = MerklePath(0, path.path_elements, (2, 0))

        assert not verify_merkle_path(values[0], bad, tree.root, hasher)


class TestPathShape:
    """Tests for path_indices and path_elements layout."""

    def test_indices_are_lsb_first_bits(self, hasher):
        tree = IndexedTree.build(4, leaves(16), hasher)

        assert tree.path(6).path_indices == (0, 1, 1, 0)
        assert tree.path(9).path_indices == (1, 0, 0, 1)

    def test_length_equals_height(self, hasher):
        tree = IndexedTree.build(5, leaves(3), hasher)
        path = tree.path(2)

        assert path.height == 5
        assert len(path.path_elements) == 5

    def test_sibling_of_last_leaf_is_zero(self, hasher):
        tree = IndexedTree.build(3, leaves(3), hasher)

        assert tree.path(2).path_elements[0] == ZERO_VALUE

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValueError, match="mismatch"):
            MerklePath(0, (1, 2), (0,))


class TestRootComputation:
    """Tests for root determinism and agreement with a naive build."""

    def test_deterministic(self, hasher):
        values = leaves(7)
        assert IndexedTree.build(4, values, hasher).root == IndexedTree.build(4, values, hasher).root

    def test_matches_naive(self, hasher):
        values = leaves(5)
        assert IndexedTree.build(3, values, hasher).root == naive_root(3, values, hasher)

    def test_empty_tree_root_is_ladder_root(self, hasher):
        tree = IndexedTree(6, hasher)

        assert len(tree) == 0
        assert tree.root == get_zero_ladder(hasher, ZERO_VALUE, 6).root

    def test_full_tree(self, hasher):
        values = leaves(8)
        assert IndexedTree.build(3, values, hasher).root == naive_root(3, values, hasher)

    def test_height_zero_root_is_leaf(self, hasher):
        tree = IndexedTree.build(0, [42], hasher)

        assert tree.root == 42
        assert tree.path(0).path_elements == ()

    def test_order_matters(self, hasher):
        values = leaves(4)
        assert IndexedTree.build(3, values, hasher).root != IndexedTree.build(3, values[::-1], hasher).root


class TestMutation:
    """Tests for append and extend."""

    def test_append_matches_build(self, hasher):
        values = leaves(11)
        tree = IndexedTree(4, hasher)
        for i, leaf in enumerate(values):
            assert tree.append(leaf) == i
            assert tree.root == IndexedTree.build(4, values[: i + 1], hasher).root

    def test_extend_matches_build(self, hasher):
        values = leaves(9)
        tree = IndexedTree.build(4, values[:3], hasher)
        tree.extend(values[3:])

        assert tree.root == IndexedTree.build(4, values, hasher).root
        assert tree.leaves == tuple(values)

    def test_extend_empty_is_noop(self, hasher):
        tree = IndexedTree.build(2, leaves(2), hasher)
        root = tree.root
        tree.extend([])

        assert tree.root == root

    def test_leaf_and_index_of(self, hasher):
        values = leaves(3)
        tree = IndexedTree.build(3, values, hasher)

        assert tree.leaf(1) == values[1]
        assert tree.leaf(6) == ZERO_VALUE
        assert tree.index_of(values[2]) == 2
        assert tree.index_of(12345) == -1


class TestBounds:
    """Tests for capacity and index errors."""

    def test_build_over_capacity(self, hasher):
        with pytest.raises(TreeFullException) as exc_info:
            IndexedTree.build(2, leaves(5), hasher)

        assert exc_info.value.details["capacity"] == 4

    def test_append_when_full(self, hasher):
        tree = IndexedTree.build(1, leaves(2), hasher)
        with pytest.raises(TreeFullException):
            tree.append(1)

    def test_extend_over_capacity_leaves_tree_unchanged(self, hasher):
        tree = IndexedTree.build(2, leaves(3), hasher)
        root = tree.root
        with pytest.raises(TreeFullException):
            tree.extend(leaves(2))

        assert tree.root == root
        assert len(tree) == 3

    @pytest.mark.parametrize("index", [-1, 8, 100])
    def test_path_out_of_range(self, hasher, index):
        tree = IndexedTree.build(3, leaves(2), hasher)
        with pytest.raises(IndexOutOfRangeException):
            tree.path(index)
