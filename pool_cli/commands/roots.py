"""
CLI Roots Command

Compute the commitment root and allow-list subset root for a snapshot.

Usage:
    ppool roots --deposits deposits.json
    ppool roots --deposits deposits.json --blocklist blocked.txt --json
"""

from __future__ import annotations

import json
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.crypto.field import to_fixed_hex
from core.crypto.hashing import load_hasher
from core.merkle.subset import build_tree_pair
from pool_cli.loaders import load_block_set, load_deposit_records


EXIT_SUCCESS = 0


@dataclass
class RootsSummary:
    """Summary of a snapshot's roots for CLI output."""
    deposits: int = 0
    blocked: int = 0
    height: int = 0
    root: str = ""
    subset_root: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: RootsSummary) -> None:
    print(f"deposits: {summary.deposits} (blocked: {summary.blocked})")
    print(f"height: {summary.height}")
    print(f"root: {summary.root}")
    print(f"subset_root: {summary.subset_root}")


def roots_cmd(args: Namespace) -> int:
    """
    Execute the roots command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    pool = args.cli_config.pool
    records = load_deposit_records(Path(args.deposits))
    block_set = load_block_set(Path(args.blocklist) if args.blocklist else None)

    pair = build_tree_pair(
        records,
        block_set,
        pool.tree_height,
        load_hasher(pool.hash_backend),
        pool.zero_element,
        pool.max_tree_height,
    )

    summary = RootsSummary(
        deposits=len(records),
        blocked=sum(1 for r in records if r.commitment in block_set),
        height=pool.tree_height,
        root=to_fixed_hex(pair.root),
        subset_root=to_fixed_hex(pair.subset_root),
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
