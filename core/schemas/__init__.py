"""
Schemas
File: __init__.py

Purpose: Export the error taxonomy.

Data models live in their own modules and are imported from there:
    from core.schemas.deposit import Deposit, DepositRecord
    from core.schemas.witness import WithdrawalWitness

(They depend on core.crypto, which itself depends on this package's errors.)
"""

from .errors import (
    AlreadySpentException,
    BlockedDepositException,
    ConfigurationException,
    DepositNotFoundException,
    ErrorCodes,
    FeeExceedsValueException,
    IndexOutOfRangeException,
    InvalidFieldElementException,
    InvalidStateTransitionException,
    InvalidTreeHeightException,
    InvariantViolationException,
    LedgerRejectedException,
    NonContiguousIndexException,
    NonZeroRefundException,
    PoolError,
    PoolException,
    ProofGenerationFailedException,
    TreeFullException,
)

__all__ = [
    "AlreadySpentException",
    "BlockedDepositException",
    "ConfigurationException",
    "DepositNotFoundException",
    "ErrorCodes",
    "FeeExceedsValueException",
    "IndexOutOfRangeException",
    "InvalidFieldElementException",
    "InvalidStateTransitionException",
    "InvalidTreeHeightException",
    "InvariantViolationException",
    "LedgerRejectedException",
    "NonContiguousIndexException",
    "NonZeroRefundException",
    "PoolError",
    "PoolException",
    "ProofGenerationFailedException",
    "TreeFullException",
]
