"""
Runtime Configuration

Central configuration for tree geometry, pool parameters and the hash backend.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from core.crypto.field import FIELD_SIZE_BYTES, ZERO_VALUE, parse_field_element
from core.merkle.zero_ladder import MAX_TREE_HEIGHT
from core.schemas.errors import ConfigurationException

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "POOL_"


@dataclass
class PoolConfig:
    """
    Deployment constants shared by both trees and the witness builder.

    These must match the deployed pool: a different height, zero element
    or hash backend yields roots the ledger does not recognise.
    """
    tree_height: int = 20
    max_tree_height: int = MAX_TREE_HEIGHT
    zero_element: int = ZERO_VALUE
    field_size_bytes: int = FIELD_SIZE_BYTES
    denomination: int = 10**18  # 1 ether in wei
    refund_allowed: bool = False
    hash_backend: str = "sha256"

    def validate(self) -> None:
        """
        Raises:
            ConfigurationException: If any value is out of range
        """
        if not 0 <= self.tree_height <= self.max_tree_height:
            raise ConfigurationException(
                f"tree_height must be in 0..{self.max_tree_height}, got {self.tree_height}",
                details={"tree_height": self.tree_height},
            )
        if self.denomination <= 0:
            raise ConfigurationException(
                "denomination must be positive",
                details={"denomination": str(self.denomination)},
            )
        if self.field_size_bytes <= 0:
            raise ConfigurationException("field_size_bytes must be positive")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    pool: PoolConfig = field(default_factory=PoolConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - POOL_TREE_HEIGHT: Tree height shared by both trees
        - POOL_DENOMINATION: Pool denomination (smallest unit)
        - POOL_REFUND_ALLOWED: Allow non-zero refunds (true/false)
        - POOL_HASH_BACKEND: "sha256" or "module:attribute"
        - POOL_ZERO_ELEMENT: Canonical zero element (decimal or 0x-hex)
        - POOL_LOG_LEVEL: Log level
        - POOL_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}TREE_HEIGHT"):
            overrides.setdefault("pool", {})["tree_height"] = int(os.getenv(f"{ENV_PREFIX}TREE_HEIGHT"))
        if os.getenv(f"{ENV_PREFIX}DENOMINATION"):
            overrides.setdefault("pool", {})["denomination"] = int(os.getenv(f"{ENV_PREFIX}DENOMINATION"))
        if os.getenv(f"{ENV_PREFIX}REFUND_ALLOWED"):
            overrides.setdefault("pool", {})["refund_allowed"] = (
                os.getenv(f"{ENV_PREFIX}REFUND_ALLOWED", "false").lower() == "true"
            )
        if os.getenv(f"{ENV_PREFIX}HASH_BACKEND"):
            overrides.setdefault("pool", {})["hash_backend"] = os.getenv(f"{ENV_PREFIX}HASH_BACKEND")
        if os.getenv(f"{ENV_PREFIX}ZERO_ELEMENT"):
            overrides.setdefault("pool", {})["zero_element"] = os.getenv(f"{ENV_PREFIX}ZERO_ELEMENT")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        pool_data = dict(data.get("pool", {}) or {})
        if "zero_element" in pool_data:
            pool_data["zero_element"] = parse_field_element(pool_data["zero_element"])

        try:
            pool = PoolConfig(**pool_data) if pool_data else PoolConfig()
        except TypeError as e:
            raise ConfigurationException(f"Invalid pool configuration: {e}") from e
        pool.validate()

        return cls(
            pool=pool,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        if "pool" in overrides:
            for key, value in overrides["pool"].items():
                if key == "zero_element":
                    value = parse_field_element(value)
                setattr(new_config.pool, key, value)
            new_config.pool.validate()

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "pool": {
                "tree_height": self.pool.tree_height,
                "max_tree_height": self.pool.max_tree_height,
                "zero_element": str(self.pool.zero_element),
                "field_size_bytes": self.pool.field_size_bytes,
                "denomination": self.pool.denomination,
                "refund_allowed": self.pool.refund_allowed,
                "hash_backend": self.pool.hash_backend,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


YAML_SUFFIXES = (".yaml", ".yml")


def default_config_paths() -> list[Path]:
    """Locations searched when no explicit config file is given, first match wins."""
    return [
        Path.cwd() / "pool.json",
        Path.cwd() / ".pool.json",
        Path.cwd() / "pool.yaml",
        Path.home() / ".config" / "pool" / "config.json",
        Path.home() / ".config" / "pool" / "config.yaml",
    ]


def load_config_file(path: str | Path) -> RuntimeConfig:
    """Load configuration from a JSON or YAML file, chosen by suffix."""
    path = Path(path)
    if path.suffix.lower() in YAML_SUFFIXES:
        return RuntimeConfig.from_yaml(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return RuntimeConfig.from_dict(data)


def load_runtime_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration from a file, then overlay environment variables.

    Args:
        config_path: Explicit config file; when None the first existing
            entry of default_config_paths() is used, else defaults

    Returns:
        Merged configuration (environment always wins)
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = load_config_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_file(default_path)
                break

    return config.with_env_overrides()


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
