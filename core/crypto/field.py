"""
Field Elements and Wire Encoding

All leaves, hashes and circuit signals are integers in [0, p) for the
BN254 scalar field. On the wire they travel as fixed-width big-endian hex
("0x" + 64 hex digits for the 32-byte reference deployment).

Determinism Notes:
- Encoding never strips or adds leading zeros beyond the fixed width
- Parsing accepts ints, decimal strings and 0x-hex strings
"""
from __future__ import annotations

import secrets
from typing import Any

from core.schemas.errors import InvalidFieldElementException


# BN254 scalar field (the field used by circom/snarkjs Groth16 circuits)
FIELD_MODULUS: int = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# keccak256("tornado") % FIELD_MODULUS, the pool's empty leaf and exclusion sentinel
ZERO_VALUE: int = 21663839004416932945382355908790599225266501822907911457504978515578255421292

FIELD_SIZE_BYTES: int = 32


def to_field(value: int) -> int:
    """Reduce an integer into the field."""
    return value % FIELD_MODULUS


def is_field_element(value: Any) -> bool:
    """Check that value is an int in [0, FIELD_MODULUS)."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value < FIELD_MODULUS
    )


def to_fixed_hex(value: int, length: int = FIELD_SIZE_BYTES) -> str:
    """
    Encode a non-negative integer as fixed-width big-endian hex.

    Args:
        value: Integer to encode
        length: Width in bytes

    Returns:
        "0x" followed by exactly 2 * length hex digits

    Raises:
        ValueError: If the value is negative or does not fit in length bytes

    Example:
        >>> to_fixed_hex(42, 4)
        '0x0000002a'
    """
    if value < 0:
        raise ValueError(f"Cannot encode negative value {value}")
    if value.bit_length() > length * 8:
        raise ValueError(f"Value does not fit in {length} bytes")
    return "0x" + value.to_bytes(length, byteorder="big").hex()


def from_hex(hex_string: str) -> int:
    """
    Decode a 0x-prefixed hex string into an integer.

    Raises:
        ValueError: If the prefix is missing or the digits are invalid
    """
    if not hex_string.startswith(("0x", "0X")):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )
    hex_content = hex_string[2:]
    if not hex_content:
        raise ValueError("Hex string has no digits after 0x prefix")
    return int(hex_content, 16)


def parse_field_element(value: Any) -> int:
    """
    Parse an int, decimal string or 0x-hex string into a field element.

    Values are range-checked, never reduced: an out-of-range input is an
    error rather than a silently different leaf.

    Raises:
        InvalidFieldElementException: If the value cannot be parsed or is
            outside [0, FIELD_MODULUS)
    """
    if isinstance(value, bool):
        raise InvalidFieldElementException("Booleans are not field elements")

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text.startswith(("0x", "0X")):
                parsed = from_hex(text)
            else:
                parsed = int(text, 10)
        except ValueError as e:
            raise InvalidFieldElementException(
                f"Cannot parse field element from {value!r}",
                details={"value": value},
            ) from e
    else:
        raise InvalidFieldElementException(
            f"Unsupported field element type: {type(value).__name__}"
        )

    if not 0 <= parsed < FIELD_MODULUS:
        raise InvalidFieldElementException(
            "Value is outside the field",
            details={"value": str(parsed)},
        )
    return parsed


def random_field_element(nbytes: int = 31) -> int:
    """
    Draw a uniformly random secret below the field modulus.

    31 bytes always fit in the 254-bit field without reduction.
    """
    return int.from_bytes(secrets.token_bytes(nbytes), byteorder="big")


__all__ = [
    "FIELD_MODULUS",
    "ZERO_VALUE",
    "FIELD_SIZE_BYTES",
    "to_field",
    "is_field_element",
    "to_fixed_hex",
    "from_hex",
    "parse_field_element",
    "random_field_element",
]
