"""
CLI Zeros Command

Print the zero ladder for a tree height.

Usage:
    ppool zeros --height 20
    ppool zeros --format solidity
"""

from __future__ import annotations

import json
from argparse import Namespace

from core.crypto.field import to_fixed_hex
from core.crypto.hashing import load_hasher
from core.merkle.zero_ladder import format_solidity_zeros, get_zero_ladder


EXIT_SUCCESS = 0


def zeros_cmd(args: Namespace) -> int:
    """
    Execute the zeros command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    pool = args.cli_config.pool
    height = args.height if args.height is not None else pool.tree_height

    ladder = get_zero_ladder(
        load_hasher(pool.hash_backend),
        pool.zero_element,
        height,
        pool.max_tree_height,
    )

    if args.format == "solidity":
        print(format_solidity_zeros(ladder, pool.field_size_bytes))
    else:
        data = {
            "hash_backend": pool.hash_backend,
            "height": ladder.height,
            "zero_element": to_fixed_hex(ladder.zero_element),
            "zeros": [to_fixed_hex(z) for z in ladder.zeros],
            "empty_root": to_fixed_hex(ladder.root),
        }
        print(json.dumps(data, indent=2))

    return EXIT_SUCCESS
