"""
CLI Configuration

Loads the runtime configuration for the CLI and provides the template
written by ``ppool config --init``. File discovery is shared with the API
through core.config.runtime.
"""

from __future__ import annotations

from pathlib import Path

from core.config.runtime import RuntimeConfig, load_runtime_config


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file (--config)

    Returns:
        Merged configuration
    """
    return load_runtime_config(config_path)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "pool": {
    "tree_height": 20,
    "zero_element": "21663839004416932945382355908790599225266501822907911457504978515578255421292",
    "denomination": 1000000000000000000,
    "refund_allowed": false,
    "hash_backend": "sha256"
  },
  "log_level": "INFO",
  "log_file": null
}
"""
