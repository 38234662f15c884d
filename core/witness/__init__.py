"""
Witness construction for withdrawal proofs.
"""
from .builder import WitnessBuilder, generate_withdrawal_witness

__all__ = [
    "WitnessBuilder",
    "generate_withdrawal_witness",
]
