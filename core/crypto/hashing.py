"""
Hash Primitives
Field hash capability injected into trees and the witness builder.

This module provides:
- HashPrimitive: the arity-1 / arity-2 field hash interface
- Sha256FieldHasher: SHA-256 reduced into the field (tests, local development)
- CallableHasher: adapter for circomlib-style ``fn(inputs) -> int`` hashes
- load_hasher: resolve a configured backend name to a primitive

Security/Determinism Notes:
- The configured primitive MUST be bit-exact with the one baked into the
  deployed verifier. A substitution does not fail loudly: it produces roots
  the ledger has never seen and proofs that do not verify.
- Sha256FieldHasher is not Poseidon. It exists so the engine can be
  exercised without a circuit toolchain.
"""
from __future__ import annotations

import hashlib
import importlib
import logging
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence, runtime_checkable

from core.crypto.field import FIELD_MODULUS, FIELD_SIZE_BYTES
from core.schemas.errors import ConfigurationException


logger = logging.getLogger(__name__)

SHA256_BACKEND = "sha256"

# Set once the sha256 substitution warning has been logged in this process
_sha256_warned = False


@runtime_checkable
class HashPrimitive(Protocol):
    """Field hash used for commitments, nullifier hashes and tree nodes."""

    name: str

    def hash1(self, x: int) -> int:
        ...

    def hash2(self, x: int, y: int) -> int:
        ...


def sha256_to_field(*values: int) -> int:
    """
    Hash field elements with SHA-256 and reduce into the field.

    Each value is encoded as fixed-width 32-byte big-endian so the
    digest is independent of integer magnitude.
    """
    h = hashlib.sha256()
    for v in values:
        h.update(v.to_bytes(FIELD_SIZE_BYTES, byteorder="big", signed=False))
    return int.from_bytes(h.digest(), byteorder="big") % FIELD_MODULUS


@dataclass(frozen=True)
class Sha256FieldHasher:
    """SHA-256-to-field primitive. Deterministic, not circuit compatible."""

    name: str = "sha256"

    def hash1(self, x: int) -> int:
        return sha256_to_field(x)

    def hash2(self, x: int, y: int) -> int:
        return sha256_to_field(x, y)


class CallableHasher:
    """
    Adapt a circomlib-style hash function to HashPrimitive.

    The wrapped function takes a list of field elements and returns one
    field element, e.g. ``poseidon([nullifier, secret])``.

    Example:
        >>> hasher = CallableHasher(my_poseidon, name="poseidon")
        >>> hasher.hash2(1, 2) == my_poseidon([1, 2])
        True
    """

    def __init__(self, fn: Callable[[Sequence[int]], int], name: str | None = None) -> None:
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "callable")

    def hash1(self, x: int) -> int:
        return int(self._fn([x]))

    def hash2(self, x: int, y: int) -> int:
        return int(self._fn([x, y]))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallableHasher):
            return NotImplemented
        return self._fn is other._fn and self.name == other.name

    def __hash__(self) -> int:
        # Hasher instances key the zero ladder cache; equal backends share one ladder
        return hash((id(self._fn), self.name))

    def __repr__(self) -> str:
        return f"CallableHasher(name={self.name!r})"


def load_hasher(backend: str) -> HashPrimitive:
    """
    Resolve a hash backend by name.

    Args:
        backend: "sha256", or "package.module:attribute" naming a callable
                 that hashes a list of field elements

    Returns:
        A HashPrimitive

    Raises:
        ConfigurationException: If the name is malformed or cannot be imported
    """
    global _sha256_warned
    if backend == SHA256_BACKEND:
        if not _sha256_warned:
            _sha256_warned = True
            logger.warning(
                "Using the sha256 hash backend: roots and zeros will not match a "
                "Poseidon verifier. Set POOL_HASH_BACKEND to module:attribute for deployments."
            )
        return Sha256FieldHasher()

    module_name, sep, attr = backend.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationException(
            f"Unknown hash backend {backend!r}; expected 'sha256' or 'module:attribute'",
            details={"hash_backend": backend},
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationException(
            f"Cannot import hash backend module {module_name!r}",
            details={"hash_backend": backend},
        ) from e

    fn = getattr(module, attr, None)
    if fn is None or not callable(fn):
        raise ConfigurationException(
            f"Hash backend {backend!r} is not a callable",
            details={"hash_backend": backend},
        )

    logger.info(f"Loaded hash backend {backend}")
    return CallableHasher(fn, name=backend)


__all__ = [
    "SHA256_BACKEND",
    "HashPrimitive",
    "Sha256FieldHasher",
    "CallableHasher",
    "sha256_to_field",
    "load_hasher",
]
