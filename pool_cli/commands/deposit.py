"""
CLI Deposit Command

Generate a fresh deposit note for local testing.

Usage:
    ppool deposit --out note.json
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from core.crypto.field import to_fixed_hex
from core.crypto.hashing import load_hasher
from core.schemas.deposit import Deposit


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def deposit_cmd(args: Namespace) -> int:
    """
    Execute the deposit command.

    The note holds the secret and nullifier in clear; it is printed only
    when no --out path is given.
    """
    hasher = load_hasher(args.cli_config.pool.hash_backend)
    deposit = Deposit.create(hasher)

    note = {
        "nullifier": to_fixed_hex(deposit.nullifier),
        "secret": to_fixed_hex(deposit.secret),
        "commitment": deposit.commitment_hex,
        "nullifierHash": to_fixed_hex(deposit.nullifier_hash(hasher)),
        "hashBackend": hasher.name,
    }

    if args.out:
        out_path = Path(args.out)
        if out_path.exists():
            print(f"Error: Note file already exists: {out_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        out_path.write_text(json.dumps(note, indent=2) + "\n", encoding="utf-8")
        print(f"Created deposit note: {out_path}")
        print(f"commitment: {note['commitment']}")
    else:
        print(json.dumps(note, indent=2))

    return EXIT_SUCCESS
