"""
Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for witness construction and withdrawal.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

All locally-detectable failures (lookup, blocklist, fee/refund, tree
capacity, index range) are raised synchronously before any proof work.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Input & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    INVALID_FIELD_ELEMENT = "INVALID_FIELD_ELEMENT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Deposit Snapshot Errors
    DEPOSIT_NOT_FOUND = "DEPOSIT_NOT_FOUND"
    BLOCKED_DEPOSIT = "BLOCKED_DEPOSIT"
    NON_CONTIGUOUS_INDEX = "NON_CONTIGUOUS_INDEX"

    # Tree Errors
    TREE_FULL = "TREE_FULL"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    INVALID_TREE_HEIGHT = "INVALID_TREE_HEIGHT"

    # Withdrawal Parameter Errors
    FEE_EXCEEDS_VALUE = "FEE_EXCEEDS_VALUE"
    NON_ZERO_REFUND = "NON_ZERO_REFUND"

    # Spend, Proof & Settlement Errors
    ALREADY_SPENT = "ALREADY_SPENT"
    PROOF_GENERATION_FAILED = "PROOF_GENERATION_FAILED"
    LEDGER_REJECTED = "LEDGER_REJECTED"

    # Internal Errors
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class PoolError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors across process boundaries (HTTP responses,
    CLI JSON output) without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.DEPOSIT_NOT_FOUND],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether refreshing the snapshot and retrying can succeed",
    )

    def to_exception(self) -> "PoolException":
        """Convert this error model to a raised exception."""
        return PoolException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class PoolException(Exception):
    """
    Base exception for all pool engine errors.

    Carries structured error information and can be converted
    to/from PoolError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "POOL_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> PoolError:
        """Convert this exception to a PoolError model."""
        return PoolError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidFieldElementException(PoolException, ValueError):
    """
    Exception raised when a value is not a valid field element.

    Also a ValueError so Pydantic reports it as a validation error.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_FIELD_ELEMENT,
            details=details,
        )


class ConfigurationException(PoolException):
    """Exception raised for invalid or unloadable configuration."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=details,
        )


class DepositNotFoundException(PoolException):
    """Exception raised when a deposit's commitment is absent from the snapshot."""

    def __init__(
        self,
        message: str = "Deposit not found in deposit history",
        commitment: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if commitment:
            full_details["commitment"] = commitment
        super().__init__(
            message=message,
            code=ErrorCodes.DEPOSIT_NOT_FOUND,
            details=full_details,
            retryable=True,
        )


class BlockedDepositException(PoolException):
    """Exception raised when the withdrawing deposit is on the blocklist."""

    def __init__(
        self,
        message: str = "Deposit is on the blocklist and cannot use the allow-list root",
        commitment: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if commitment:
            full_details["commitment"] = commitment
        super().__init__(
            message=message,
            code=ErrorCodes.BLOCKED_DEPOSIT,
            details=full_details,
        )


class NonContiguousIndexException(PoolException):
    """Exception raised when deposit leaf indices are not exactly 0..n-1."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        found_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if position is not None:
            full_details["position"] = position
        if found_index is not None:
            full_details["found_index"] = found_index
        super().__init__(
            message=message,
            code=ErrorCodes.NON_CONTIGUOUS_INDEX,
            details=full_details,
        )


class TreeFullException(PoolException):
    """Exception raised when a tree's 2**height capacity is exhausted."""

    def __init__(
        self,
        message: str,
        capacity: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if capacity is not None:
            full_details["capacity"] = capacity
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_FULL,
            details=full_details,
        )


class IndexOutOfRangeException(PoolException):
    """Exception raised when a leaf index falls outside the tree."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
        )


class InvalidTreeHeightException(PoolException):
    """Exception raised when a tree height is negative or above the maximum."""

    def __init__(
        self,
        message: str,
        height: int | None = None,
        max_height: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if height is not None:
            details["height"] = height
        if max_height is not None:
            details["max_height"] = max_height
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_TREE_HEIGHT,
            details=details,
        )


class FeeExceedsValueException(PoolException):
    """Exception raised when the relayer fee exceeds the denomination."""

    def __init__(
        self,
        message: str = "Fee exceeds transfer value",
        fee: int | None = None,
        denomination: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if fee is not None:
            details["fee"] = str(fee)
        if denomination is not None:
            details["denomination"] = str(denomination)
        super().__init__(
            message=message,
            code=ErrorCodes.FEE_EXCEEDS_VALUE,
            details=details,
        )


class NonZeroRefundException(PoolException):
    """Exception raised when a refund is requested where refunds are disallowed."""

    def __init__(
        self,
        message: str = "Refund value is supposed to be zero for this pool",
        refund: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if refund is not None:
            details["refund"] = str(refund)
        super().__init__(
            message=message,
            code=ErrorCodes.NON_ZERO_REFUND,
            details=details,
        )


class AlreadySpentException(PoolException):
    """
    Exception raised when a nullifier hash is known locally to be spent.

    Advisory only: the ledger remains authoritative.
    """

    def __init__(
        self,
        message: str = "The note has been already spent",
        nullifier_hash: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if nullifier_hash:
            details["nullifier_hash"] = nullifier_hash
        super().__init__(
            message=message,
            code=ErrorCodes.ALREADY_SPENT,
            details=details,
        )


class ProofGenerationFailedException(PoolException):
    """Exception raised when the proof backend fails to produce a proof."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_GENERATION_FAILED,
            details=details,
        )


class LedgerRejectedException(PoolException):
    """
    Exception raised when the ledger rejects a withdrawal.

    The ledger's reason is passed through verbatim. Reasons that point at a
    stale snapshot (unknown merkle root) are marked retryable.
    """

    def __init__(
        self,
        reason: str,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["reason"] = reason
        super().__init__(
            message=reason,
            code=ErrorCodes.LEDGER_REJECTED,
            details=full_details,
            retryable=retryable,
        )
        self.reason = reason


class InvariantViolationException(PoolException):
    """Exception raised when an internal consistency check fails (a bug, not user error)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVARIANT_VIOLATION,
            details=details,
        )


class InvalidStateTransitionException(PoolException):
    """Exception raised when a withdrawal attempt is driven out of order."""

    def __init__(
        self,
        current: str,
        target: str,
    ) -> None:
        super().__init__(
            message=f"Cannot move withdrawal attempt from {current} to {target}",
            code=ErrorCodes.INVALID_STATE_TRANSITION,
            details={"current": current, "target": target},
        )
