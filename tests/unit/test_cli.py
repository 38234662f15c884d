"""
CLI Unit Tests
Tests for pool_cli (argument parsing, commands, exit codes)
"""
import json

import pytest

from core.crypto.field import ZERO_VALUE, to_fixed_hex
from pool_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILED,
    create_parser,
    main,
)

from fixtures.common import make_snapshot


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each CLI test in an empty directory with no user config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def write_snapshot(workdir, hasher, count=3):
    deposits, records = make_snapshot(count, hasher)
    path = workdir / "deposits.json"
    path.write_text(json.dumps([
        {"leafIndex": r.leaf_index, "commitment": to_fixed_hex(r.commitment)} for r in records
    ]))
    return deposits, path


def write_note(workdir, deposit, name="note.json"):
    path = workdir / name
    path.write_text(json.dumps({
        "nullifier": to_fixed_hex(deposit.nullifier),
        "secret": to_fixed_hex(deposit.secret),
        "commitment": deposit.commitment_hex,
    }))
    return path


class TestParser:
    """Tests for create_parser()."""

    def test_witness_defaults(self):
        args = create_parser().parse_args([
            "witness", "--note", "n.json", "--deposits", "d.json", "--recipient", "0x01",
        ])

        assert args.relayer == "0"
        assert args.fee == 0
        assert args.refund == 0
        assert args.out is None

    def test_no_command(self, workdir):
        assert main([]) == EXIT_RUNTIME_ERROR


class TestZerosCommand:
    """Tests for `ppool zeros`."""

    def test_json_output(self, workdir, capsys):
        assert main(["zeros", "--height", "3"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)

        assert data["height"] == 3
        assert len(data["zeros"]) == 4
        assert data["zeros"][0] == to_fixed_hex(ZERO_VALUE)
        assert data["empty_root"] == data["zeros"][3]

    def test_solidity_output(self, workdir, capsys):
        assert main(["zeros", "--format", "solidity"]) == EXIT_SUCCESS
        lines = capsys.readouterr().out.strip().splitlines()

        assert len(lines) == 20
        assert lines[0].startswith("else if (i == 0) return bytes32(0x2fe54c60")

    def test_height_too_large(self, workdir, capsys):
        assert main(["zeros", "--height", "99"]) == EXIT_VALIDATION_FAILED
        assert "INVALID_TREE_HEIGHT" in capsys.readouterr().err


class TestRootsCommand:
    """Tests for `ppool roots`."""

    def test_roots_json(self, workdir, hasher, capsys):
        deposits, path = write_snapshot(workdir, hasher)
        blocklist = workdir / "blocked.txt"
        blocklist.write_text(f"# sanctioned\n{deposits[1].commitment_hex}\n\n")

        assert main(["roots", "--deposits", str(path), "--blocklist", str(blocklist), "--json"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)

        assert data["deposits"] == 3
        assert data["blocked"] == 1
        assert data["root"] != data["subset_root"]

    def test_json_blocklist(self, workdir, hasher, capsys):
        deposits, path = write_snapshot(workdir, hasher)
        blocklist = workdir / "blocked.json"
        blocklist.write_text(json.dumps([str(deposits[0].commitment)]))

        assert main(["roots", "-d", str(path), "-b", str(blocklist), "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["blocked"] == 1

    def test_missing_file(self, workdir, capsys):
        assert main(["roots", "--deposits", "nope.json"]) == EXIT_RUNTIME_ERROR
        assert "Error" in capsys.readouterr().err

    def test_gap_in_snapshot(self, workdir, capsys):
        path = workdir / "deposits.json"
        path.write_text(json.dumps([{"leafIndex": 1, "commitment": "5"}]))

        assert main(["roots", "--deposits", str(path)]) == EXIT_VALIDATION_FAILED
        assert "NON_CONTIGUOUS_INDEX" in capsys.readouterr().err


class TestWitnessCommand:
    """Tests for `ppool witness`."""

    def test_writes_circuit_input(self, workdir, hasher):
        deposits, path = write_snapshot(workdir, hasher)
        note = write_note(workdir, deposits[2])
        out = workdir / "input.json"

        code = main([
            "witness", "--note", str(note), "--deposits", str(path),
            "--recipient", "0x1234", "--fee", "100", "--out", str(out),
        ])

        assert code == EXIT_SUCCESS
        data = json.loads(out.read_text())
        assert data["recipient"] == str(0x1234)
        assert data["fee"] == "100"
        assert len(data["pathElements"]) == 20
        assert data["pathIndices"][:2] == ["0", "1"]

    def test_blocked_note(self, workdir, hasher, capsys):
        deposits, path = write_snapshot(workdir, hasher)
        note = write_note(workdir, deposits[0])
        blocklist = workdir / "blocked.txt"
        blocklist.write_text(deposits[0].commitment_hex + "\n")

        code = main([
            "witness", "--note", str(note), "--deposits", str(path),
            "--blocklist", str(blocklist), "--recipient", "1",
        ])

        assert code == EXIT_VALIDATION_FAILED
        assert "BLOCKED_DEPOSIT" in capsys.readouterr().err

    def test_uses_config_height(self, workdir, hasher, monkeypatch):
        monkeypatch.setenv("POOL_TREE_HEIGHT", "5")
        deposits, path = write_snapshot(workdir, hasher)
        note = write_note(workdir, deposits[1])
        out = workdir / "input.json"

        assert main([
            "witness", "-n", str(note), "-d", str(path), "--recipient", "1", "-o", str(out),
        ]) == EXIT_SUCCESS
        assert len(json.loads(out.read_text())["pathElements"]) == 5


class TestDepositCommand:
    """Tests for `ppool deposit`."""

    def test_note_round_trips_into_witness(self, workdir, hasher):
        note = workdir / "note.json"
        assert main(["deposit", "--out", str(note)]) == EXIT_SUCCESS

        data = json.loads(note.read_text())
        assert int(data["commitment"], 16) == hasher.hash2(
            int(data["nullifier"], 16), int(data["secret"], 16)
        )
        assert int(data["nullifierHash"], 16) == hasher.hash1(int(data["nullifier"], 16))

        deposits = workdir / "deposits.json"
        deposits.write_text(json.dumps([{"leafIndex": 0, "commitment": data["commitment"]}]))
        assert main([
            "witness", "-n", str(note), "-d", str(deposits), "--recipient", "1", "-o", "w.json",
        ]) == EXIT_SUCCESS

    def test_refuses_overwrite(self, workdir):
        (workdir / "note.json").write_text("{}")
        assert main(["deposit", "--out", "note.json"]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    """Tests for `ppool config`."""

    def test_init_then_show(self, workdir, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (workdir / "pool.json").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

        capsys.readouterr()
        assert main(["config", "--show"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["pool"]["tree_height"] == 20
        assert data["pool"]["zero_element"] == str(ZERO_VALUE)

    def test_explicit_config_file(self, workdir, capsys):
        path = workdir / "custom.yaml"
        path.write_text("pool:\n  tree_height: 7\n")

        assert main(["--config", str(path), "config", "--show"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["pool"]["tree_height"] == 7

    def test_invalid_config(self, workdir, capsys):
        path = workdir / "bad.json"
        path.write_text(json.dumps({"pool": {"tree_height": 64}}))

        assert main(["--config", str(path), "zeros"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err
