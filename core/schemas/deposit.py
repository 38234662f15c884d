"""
Schemas
File: deposit.py

Purpose: Deposit notes and the deposit history records that position them
in the trees.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from core.crypto.field import parse_field_element, random_field_element, to_fixed_hex
from core.crypto.hashing import HashPrimitive


# Field element accepting int, decimal string or 0x-hex; dumped as decimal string
FieldElement = Annotated[
    int,
    BeforeValidator(parse_field_element),
    PlainSerializer(lambda v: str(v), return_type=str, when_used="json"),
]


class Deposit(BaseModel):
    """
    A depositor's note.

    commitment = hash2(nullifier, secret). Immutable once recorded.
    The nullifier and secret never leave the client except as private
    circuit inputs.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    nullifier: FieldElement = Field(..., description="Deposit-specific secret revealed only as its hash")
    secret: FieldElement = Field(..., description="Deposit secret")
    commitment: FieldElement = Field(..., description="hash2(nullifier, secret)")

    @classmethod
    def create(
        cls,
        hasher: HashPrimitive,
        nullifier: int | None = None,
        secret: int | None = None,
    ) -> "Deposit":
        """
        Create a deposit note, drawing 31-byte random secrets when not given.
        """
        if nullifier is None:
            nullifier = random_field_element(31)
        if secret is None:
            secret = random_field_element(31)
        return cls(
            nullifier=nullifier,
            secret=secret,
            commitment=hasher.hash2(nullifier, secret),
        )

    def nullifier_hash(self, hasher: HashPrimitive) -> int:
        """Public nullifier hash revealed at withdrawal."""
        return hasher.hash1(self.nullifier)

    def matches(self, hasher: HashPrimitive) -> bool:
        """Check that commitment was computed from this note's secrets."""
        return hasher.hash2(self.nullifier, self.secret) == self.commitment

    @property
    def commitment_hex(self) -> str:
        return to_fixed_hex(self.commitment)

    def __repr__(self) -> str:
        return f"Deposit(commitment={self.commitment_hex})"


class DepositRecord(BaseModel):
    """
    One entry of the externally supplied deposit history.

    Accepts the ``leafIndex`` spelling used by deposit event feeds.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    leaf_index: int = Field(..., ge=0, alias="leafIndex", description="Fixed tree position")
    commitment: FieldElement = Field(..., description="Deposit commitment")

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> "DepositRecord":
        """
        Build a record from a Deposit event, with or without a
        ``returnValues`` envelope.
        """
        values = event.get("returnValues", event)
        return cls.model_validate(values)


__all__ = [
    "FieldElement",
    "Deposit",
    "DepositRecord",
]
