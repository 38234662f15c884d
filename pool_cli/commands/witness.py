"""
CLI Witness Command

Build the withdrawal witness for a deposit note and write the circuit input.

Usage:
    ppool witness --note note.json --deposits deposits.json --recipient 0x.. --out input.json
"""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path

from core.crypto.field import parse_field_element
from core.crypto.hashing import load_hasher
from core.witness.builder import WitnessBuilder
from pool_cli.loaders import load_block_set, load_deposit_records, load_note


EXIT_SUCCESS = 0


def witness_cmd(args: Namespace) -> int:
    """
    Execute the witness command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    pool = args.cli_config.pool
    builder = WitnessBuilder(load_hasher(pool.hash_backend), pool)

    deposit = load_note(Path(args.note))
    records = load_deposit_records(Path(args.deposits))
    block_set = load_block_set(Path(args.blocklist) if args.blocklist else None)

    witness = builder.generate_withdrawal_witness(
        deposit,
        records,
        block_set,
        recipient=parse_field_element(args.recipient),
        relayer=parse_field_element(args.relayer),
        fee=args.fee,
        refund=args.refund,
    )

    circuit_input = json.dumps(witness.to_circuit_input(), indent=2)
    if args.out:
        Path(args.out).write_text(circuit_input + "\n", encoding="utf-8")
        print(f"Wrote circuit input: {args.out}")
        print(f"leaf_index: {witness.leaf_index}")
        print(f"root: {witness.public_signals_hex()[0]}")
        print(f"subset_root: {witness.public_signals_hex()[1]}")
    else:
        print(circuit_input)

    return EXIT_SUCCESS
