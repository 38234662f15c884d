"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m pool_cli zeros [--height N] [--format json|solidity]
    python -m pool_cli roots --deposits FILE [--blocklist FILE] [--json]
    python -m pool_cli witness --note FILE --deposits FILE [--blocklist FILE] --recipient ADDR
                               [--relayer ADDR] [--fee N] [--refund N] [--out FILE]
    python -m pool_cli deposit [--out FILE]
    python -m pool_cli config --init

Environment Variables:
    POOL_TREE_HEIGHT        Tree height (default: 20)
    POOL_DENOMINATION       Pool denomination in the smallest unit
    POOL_REFUND_ALLOWED     Allow non-zero refunds (default: false)
    POOL_HASH_BACKEND       "sha256" or "module:attribute"
    POOL_ZERO_ELEMENT       Canonical zero element
    POOL_LOG_LEVEL          Log level (default: INFO)
    POOL_LOG_FILE           Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.schemas.errors import PoolException
from pool_cli import __version__
from pool_cli.commands import deposit, roots, witness, zeros
from pool_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VALIDATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="ppool",
        description="Privacy pool CLI - Build trees, roots and withdrawal witnesses.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./pool.json or ~/.config/pool/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- zeros command ---
    zeros_parser = subparsers.add_parser(
        "zeros",
        help="Print the zero ladder",
        description="Compute the empty-subtree hashes for each level.",
    )
    zeros_parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Tree height (default: from config)",
    )
    zeros_parser.add_argument(
        "--format",
        type=str,
        choices=["json", "solidity"],
        default="json",
        help="Output format (default: json)",
    )
    zeros_parser.set_defaults(func=zeros.zeros_cmd)

    # --- roots command ---
    roots_parser = subparsers.add_parser(
        "roots",
        help="Compute commitment and subset roots",
        description="Build both trees from a deposit snapshot and print their roots.",
    )
    roots_parser.add_argument(
        "--deposits", "-d",
        type=str,
        required=True,
        help="JSON file with deposit records",
    )
    roots_parser.add_argument(
        "--blocklist", "-b",
        type=str,
        default=None,
        help="Blocked commitments (JSON list or one per line)",
    )
    roots_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    roots_parser.set_defaults(func=roots.roots_cmd)

    # --- witness command ---
    witness_parser = subparsers.add_parser(
        "witness",
        help="Build a withdrawal witness",
        description="Assemble the circuit input for withdrawing a deposit note.",
    )
    witness_parser.add_argument("--note", "-n", type=str, required=True, help="Deposit note JSON file")
    witness_parser.add_argument("--deposits", "-d", type=str, required=True, help="JSON file with deposit records")
    witness_parser.add_argument("--blocklist", "-b", type=str, default=None, help="Blocked commitments file")
    witness_parser.add_argument("--recipient", type=str, required=True, help="Recipient address (hex or decimal)")
    witness_parser.add_argument("--relayer", type=str, default="0", help="Relayer address (default: 0)")
    witness_parser.add_argument("--fee", type=int, default=0, help="Relayer fee (default: 0)")
    witness_parser.add_argument("--refund", type=int, default=0, help="Refund (default: 0)")
    witness_parser.add_argument("--out", "-o", type=str, default=None, help="Output path for circuit input JSON")
    witness_parser.set_defaults(func=witness.witness_cmd)

    # --- deposit command ---
    deposit_parser = subparsers.add_parser(
        "deposit",
        help="Generate a deposit note",
        description="Draw a fresh nullifier and secret and compute the commitment.",
    )
    deposit_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the note to this file instead of stdout",
    )
    deposit_parser.set_defaults(func=deposit.deposit_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="pool.json",
        help="Path for config file (default: pool.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (POOL_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: ppool config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=validation failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except PoolException as e:
        if args.debug:
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_VALIDATION_FAILED
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
