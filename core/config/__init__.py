"""
Runtime Configuration Module

Provides configuration loading and management for the witness engine.
"""

from .runtime import (
    ENV_PREFIX,
    PoolConfig,
    RuntimeConfig,
    default_config_paths,
    get_default_config,
    load_config_file,
    load_runtime_config,
    set_default_config,
)

__all__ = [
    "ENV_PREFIX",
    "PoolConfig",
    "RuntimeConfig",
    "default_config_paths",
    "get_default_config",
    "load_config_file",
    "load_runtime_config",
    "set_default_config",
]
