"""
Core cryptographic utilities.

Field element encoding and the injectable hash primitive.
"""
from .field import (
    FIELD_MODULUS,
    FIELD_SIZE_BYTES,
    ZERO_VALUE,
    from_hex,
    is_field_element,
    parse_field_element,
    random_field_element,
    to_field,
    to_fixed_hex,
)
from .hashing import (
    CallableHasher,
    HashPrimitive,
    Sha256FieldHasher,
    load_hasher,
    sha256_to_field,
)

__all__ = [
    "FIELD_MODULUS",
    "FIELD_SIZE_BYTES",
    "ZERO_VALUE",
    "from_hex",
    "is_field_element",
    "parse_field_element",
    "random_field_element",
    "to_field",
    "to_fixed_hex",
    "CallableHasher",
    "HashPrimitive",
    "Sha256FieldHasher",
    "load_hasher",
    "sha256_to_field",
]
