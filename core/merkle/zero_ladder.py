"""
Zero Ladder
Precomputed roots of empty subtrees.

zeros[0] is the canonical zero element and zeros[i] = hash2(zeros[i-1], zeros[i-1])
is the root of an all-empty subtree of depth i. Trees fill unpopulated
regions from this table instead of materializing them.

The table is computed once per (hasher, zero element, height) and cached
as frozen process-wide state. Readers never lock after initialization.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from core.crypto.field import ZERO_VALUE, to_fixed_hex
from core.crypto.hashing import HashPrimitive
from core.schemas.errors import InvalidTreeHeightException


logger = logging.getLogger(__name__)

# Upper bound on tree height (guards against unbounded memory)
MAX_TREE_HEIGHT: int = 32

_ladder_cache: dict[tuple[HashPrimitive, int, int], "ZeroLadder"] = {}
_ladder_lock = threading.Lock()


@dataclass(frozen=True)
class ZeroLadder:
    """
    Empty-subtree hashes for levels 0..height.

    Attributes:
        zero_element: The canonical empty leaf value (zeros[0])
        height: Highest level covered
        zeros: Tuple of height + 1 field elements
    """
    zero_element: int
    height: int
    zeros: tuple[int, ...]

    def __getitem__(self, level: int) -> int:
        return self.zeros[level]

    def __len__(self) -> int:
        return len(self.zeros)

    @property
    def root(self) -> int:
        """Root of an entirely empty tree of this height."""
        return self.zeros[self.height]


def validate_height(height: int, max_height: int = MAX_TREE_HEIGHT) -> None:
    """
    Check a tree height against the configured bounds.

    Raises:
        InvalidTreeHeightException: If height is negative or above max_height
    """
    if height < 0 or height > max_height:
        raise InvalidTreeHeightException(
            f"Tree height {height} outside supported range 0..{max_height}",
            height=height,
            max_height=max_height,
        )


def compute_zero_ladder(hasher: HashPrimitive, zero_element: int, height: int) -> tuple[int, ...]:
    """Compute zeros[0..height] without touching the cache."""
    zeros = [zero_element]
    for _ in range(height):
        zeros.append(hasher.hash2(zeros[-1], zeros[-1]))
    return tuple(zeros)


def get_zero_ladder(
    hasher: HashPrimitive,
    zero_element: int = ZERO_VALUE,
    height: int = 20,
    max_height: int = MAX_TREE_HEIGHT,
) -> ZeroLadder:
    """
    Return the cached ladder for (hasher, zero_element, height).

    Computed on first use under a lock, then shared read-only.

    Raises:
        InvalidTreeHeightException: If height exceeds max_height
    """
    validate_height(height, max_height)

    key = (hasher, zero_element, height)
    ladder = _ladder_cache.get(key)
    if ladder is not None:
        return ladder

    with _ladder_lock:
        ladder = _ladder_cache.get(key)
        if ladder is None:
            ladder = ZeroLadder(
                zero_element=zero_element,
                height=height,
                zeros=compute_zero_ladder(hasher, zero_element, height),
            )
            _ladder_cache[key] = ladder
            logger.debug(f"Computed zero ladder: hasher={hasher.name} height={height}")
    return ladder


def clear_zero_ladder_cache() -> None:
    """Drop all cached ladders."""
    with _ladder_lock:
        _ladder_cache.clear()


def format_solidity_zeros(ladder: ZeroLadder, length: int = 32) -> str:
    """
    Render the ladder as the if/else chain of the on-chain ``zeros(i)`` getter.

    One line per level below the ladder height, level 0 first.
    """
    lines = []
    for i in range(ladder.height):
        lines.append(
            f"else if (i == {i}) return bytes32({to_fixed_hex(ladder[i], length)});"
        )
    return "\n".join(lines)


__all__ = [
    "MAX_TREE_HEIGHT",
    "ZeroLadder",
    "validate_height",
    "compute_zero_ladder",
    "get_zero_ladder",
    "clear_zero_ladder_cache",
    "format_solidity_zeros",
]
