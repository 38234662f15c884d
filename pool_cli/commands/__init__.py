"""
CLI command modules.
"""

from pool_cli.commands import deposit, roots, witness, zeros

__all__ = ["deposit", "roots", "witness", "zeros"]
