"""
Schemas
File: witness.py

Purpose: The withdrawal witness (public + private proof inputs) and the
values exchanged with the external proof backend and ledger.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.crypto.field import to_fixed_hex
from core.schemas.deposit import FieldElement


# Order of the public signals as the verifier consumes them
PUBLIC_SIGNAL_ORDER: tuple[str, ...] = (
    "root",
    "subset_root",
    "nullifier_hash",
    "recipient",
    "relayer",
    "fee",
    "refund",
)


class WithdrawalWitness(BaseModel):
    """
    Complete input vector for one withdrawal proof.

    path_indices are shared verbatim by the main and subset proofs: both
    trees are built over identical leaf positions.

    Produced once per withdrawal attempt and consumed once by the proof backend.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    # Public inputs
    root: FieldElement = Field(..., description="Root of the full deposit tree")
    subset_root: FieldElement = Field(..., alias="subsetRoot", description="Root of the allow-list tree")
    nullifier_hash: FieldElement = Field(..., alias="nullifierHash")
    recipient: FieldElement = Field(..., description="Withdrawal recipient address")
    relayer: FieldElement = Field(..., description="Relayer address compensated by fee")
    fee: FieldElement = Field(...)
    refund: FieldElement = Field(...)

    # Private inputs
    nullifier: FieldElement = Field(...)
    secret: FieldElement = Field(...)
    path_elements: tuple[FieldElement, ...] = Field(..., alias="pathElements")
    path_indices: tuple[int, ...] = Field(..., alias="pathIndices")
    subset_path_elements: tuple[FieldElement, ...] = Field(..., alias="subsetPathElements")

    @model_validator(mode="after")
    def _check_paths(self) -> "WithdrawalWitness":
        height = len(self.path_indices)
        if len(self.path_elements) != height or len(self.subset_path_elements) != height:
            raise ValueError(
                f"Path lengths disagree: {len(self.path_elements)} elements, "
                f"{height} indices, {len(self.subset_path_elements)} subset elements"
            )
        if any(bit not in (0, 1) for bit in self.path_indices):
            raise ValueError("path_indices must contain only 0 and 1")
        return self

    @property
    def height(self) -> int:
        return len(self.path_indices)

    @property
    def leaf_index(self) -> int:
        """Leaf position encoded by the direction bits (never published)."""
        return sum(bit << level for level, bit in enumerate(self.path_indices))

    def public_signals(self) -> list[int]:
        """Public inputs in verifier order."""
        return [getattr(self, name) for name in PUBLIC_SIGNAL_ORDER]

    def public_signals_hex(self) -> list[str]:
        """Public inputs as fixed-width hex, the ledger's argument encoding."""
        return [to_fixed_hex(value) for value in self.public_signals()]

    def to_circuit_input(self) -> dict[str, Any]:
        """
        Circuit input with camelCase keys and every number as a decimal string.
        """
        data = self.model_dump(mode="json", by_alias=True)
        data["pathIndices"] = [str(bit) for bit in self.path_indices]
        return data

    def __repr__(self) -> str:
        return (
            f"WithdrawalWitness(root={to_fixed_hex(self.root)}, "
            f"subset_root={to_fixed_hex(self.subset_root)}, height={self.height})"
        )


class ProofResult(BaseModel):
    """Proof produced by the external backend, with the public signals it binds."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    proof: dict[str, Any] = Field(..., description="Backend-specific proof payload")
    public_signals: tuple[FieldElement, ...] = Field(...)


class SettlementResult(BaseModel):
    """Ledger outcome for a submitted withdrawal."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ok: bool = Field(..., description="Whether the ledger accepted the withdrawal")
    reason: str | None = Field(default=None, description="Verbatim rejection reason")
    tx_id: str | None = Field(default=None, description="Ledger transaction reference")


__all__ = [
    "PUBLIC_SIGNAL_ORDER",
    "WithdrawalWitness",
    "ProofResult",
    "SettlementResult",
]
