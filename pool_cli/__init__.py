"""
Privacy Pool CLI

Command-line interface for building withdrawal witnesses.

Usage:
    python -m pool_cli zeros --height 20 --format solidity
    python -m pool_cli roots --deposits deposits.json --blocklist blocked.txt
    python -m pool_cli witness --note note.json --deposits deposits.json --recipient 0x...
    python -m pool_cli deposit --out note.json
"""

__version__ = "0.1.0"
