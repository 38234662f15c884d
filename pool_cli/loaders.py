"""
Input file loaders shared by the CLI commands.

Deposit snapshots are JSON: either a list of records
(``{"leafIndex": 0, "commitment": "0x.."}``), a list of Deposit events
with a ``returnValues`` envelope, or an object with a ``deposits`` list.

Blocklists are either a JSON list of commitments or a text file with one
commitment per line (blank lines and ``#`` comments ignored).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.crypto.field import parse_field_element
from core.schemas.deposit import Deposit, DepositRecord


def load_json_file(path: Path) -> Any:
    """Load and parse a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_deposit_records(path: Path) -> list[DepositRecord]:
    data = load_json_file(path)
    if isinstance(data, dict):
        data = data.get("deposits", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of deposit records in {path}")
    return [DepositRecord.from_event(item) for item in data]


def load_block_set(path: Path | None) -> frozenset[int]:
    if path is None:
        return frozenset()

    if path.suffix.lower() == ".json":
        entries = load_json_file(path)
        if not isinstance(entries, list):
            raise ValueError(f"Expected a list of commitments in {path}")
    else:
        entries = []
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.split("#", 1)[0].strip()
            if line:
                entries.append(line)

    return frozenset(parse_field_element(entry) for entry in entries)


def load_note(path: Path) -> Deposit:
    """Load a deposit note written by ``deposit --out``."""
    data = load_json_file(path)
    return Deposit.model_validate({
        "nullifier": data["nullifier"],
        "secret": data["secret"],
        "commitment": data["commitment"],
    })
