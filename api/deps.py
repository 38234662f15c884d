"""
API Dependencies

Factories for the runtime configuration, hash primitive and witness builder.
"""

from __future__ import annotations

from core.config.runtime import RuntimeConfig, load_runtime_config
from core.crypto.hashing import HashPrimitive, load_hasher
from core.witness.builder import WitnessBuilder


def get_runtime_config() -> RuntimeConfig:
    """
    Load the service configuration for one request.

    The file search (pool.json, .pool.json, pool.yaml, then
    ~/.config/pool/) is shared with the CLI. Environment variables
    always override file values; .env is loaded by core.config.runtime.
    """
    return load_runtime_config()


def get_hasher(config: RuntimeConfig | None = None) -> HashPrimitive:
    """Resolve the configured hash primitive."""
    config = config or get_runtime_config()
    return load_hasher(config.pool.hash_backend)


def get_witness_builder(config: RuntimeConfig | None = None) -> WitnessBuilder:
    """Create a WitnessBuilder for the configured pool deployment."""
    config = config or get_runtime_config()
    return WitnessBuilder(get_hasher(config), config.pool)
