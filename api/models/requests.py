"""
API Request Models

Pydantic models for API request validation.
"""

from pydantic import BaseModel, Field

from core.schemas.deposit import Deposit, DepositRecord, FieldElement


class RootsRequest(BaseModel):
    """Request body for POST /roots endpoint."""

    deposits: list[DepositRecord] = Field(
        ...,
        description="Deposit history snapshot (leafIndex + commitment)",
    )
    blocklist: list[FieldElement] = Field(
        default_factory=list,
        description="Blocked commitments",
    )


class WitnessRequest(BaseModel):
    """Request body for POST /witness endpoint."""

    note: Deposit = Field(..., description="The withdrawing depositor's note")
    deposits: list[DepositRecord] = Field(
        ...,
        description="Deposit history snapshot (leafIndex + commitment)",
    )
    blocklist: list[FieldElement] = Field(
        default_factory=list,
        description="Blocked commitments",
    )
    recipient: FieldElement = Field(..., description="Recipient address")
    relayer: FieldElement = Field(default=0, description="Relayer address")
    fee: int = Field(default=0, description="Relayer fee")
    refund: int = Field(default=0, description="Refund amount")
    denomination: int | None = Field(
        default=None,
        description="Pool denomination (defaults to the server configuration)",
    )
