"""
Runtime Configuration Unit Tests
Tests for core/config/runtime.py
"""
import pytest

from core.config.runtime import (
    PoolConfig,
    RuntimeConfig,
    get_default_config,
    load_config_file,
    load_runtime_config,
    set_default_config,
)
from core.crypto.field import ZERO_VALUE
from core.schemas.errors import ConfigurationException


class TestPoolConfig:
    """Tests for PoolConfig defaults and validation."""

    def test_defaults_match_reference_pool(self):
        config = PoolConfig()

        assert config.tree_height == 20
        assert config.zero_element == ZERO_VALUE
        assert config.field_size_bytes == 32
        assert config.denomination == 10**18
        assert not config.refund_allowed
        assert config.hash_backend == "sha256"

    def test_height_above_max(self):
        with pytest.raises(ConfigurationException):
            PoolConfig(tree_height=40).validate()

    def test_non_positive_denomination(self):
        with pytest.raises(ConfigurationException):
            PoolConfig(denomination=0).validate()


class TestRuntimeConfig:
    """Tests for RuntimeConfig loaders."""

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"pool": {"tree_height": 8}, "log_level": "DEBUG"})

        assert config.pool.tree_height == 8
        assert config.pool.denomination == 10**18
        assert config.log_level == "DEBUG"

    def test_from_dict_parses_hex_zero_element(self):
        config = RuntimeConfig.from_dict({"pool": {"zero_element": "0x2a"}})
        assert config.pool.zero_element == 42

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigurationException, match="Invalid pool configuration"):
            RuntimeConfig.from_dict({"pool": {"depth": 20}})

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("POOL_TREE_HEIGHT", "10")
        monkeypatch.setenv("POOL_REFUND_ALLOWED", "true")
        monkeypatch.setenv("POOL_ZERO_ELEMENT", "7")
        config = RuntimeConfig.from_env()

        assert config.pool.tree_height == 10
        assert config.pool.refund_allowed
        assert config.pool.zero_element == 7

    def test_env_overrides_file_values(self, monkeypatch):
        base = RuntimeConfig.from_dict({"pool": {"tree_height": 8, "denomination": 100}})
        monkeypatch.setenv("POOL_DENOMINATION", "500")
        config = base.with_env_overrides()

        assert config.pool.denomination == 500
        assert config.pool.tree_height == 8
        assert base.pool.denomination == 100

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "pool.yaml"
        path.write_text("pool:\n  tree_height: 12\n  hash_backend: sha256\nlog_level: WARNING\n")
        config = RuntimeConfig.from_yaml(path)

        assert config.pool.tree_height == 12
        assert config.log_level == "WARNING"

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({"pool": {"tree_height": 6}})
        assert RuntimeConfig.from_dict(config.to_dict()).pool == config.pool


class TestConfigDiscovery:
    """Tests for the config file search shared by the CLI and the API."""

    @pytest.fixture(autouse=True)
    def empty_home(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))

    def test_defaults_without_files(self):
        assert load_runtime_config().pool == PoolConfig()

    def test_finds_pool_yaml(self, tmp_path):
        (tmp_path / "pool.yaml").write_text("pool:\n  tree_height: 7\n")

        assert load_runtime_config().pool.tree_height == 7

    def test_json_takes_precedence_over_yaml(self, tmp_path):
        (tmp_path / "pool.yaml").write_text("pool:\n  tree_height: 7\n")
        (tmp_path / "pool.json").write_text('{"pool": {"tree_height": 9}}')

        assert load_runtime_config().pool.tree_height == 9

    def test_user_config_dir(self, tmp_path):
        user_dir = tmp_path / "home" / ".config" / "pool"
        user_dir.mkdir(parents=True)
        (user_dir / "config.yaml").write_text("pool:\n  tree_height: 5\n")

        assert load_runtime_config().pool.tree_height == 5

    def test_env_overrides_discovered_file(self, tmp_path, monkeypatch):
        (tmp_path / "pool.yaml").write_text("pool:\n  tree_height: 7\n")
        monkeypatch.setenv("POOL_TREE_HEIGHT", "3")

        assert load_runtime_config().pool.tree_height == 3

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_file(tmp_path / "absent.json")


class TestDefaultConfig:
    """Tests for the process default."""

    def test_set_and_get(self):
        previous = get_default_config()
        custom = RuntimeConfig.from_dict({"pool": {"tree_height": 5}})
        try:
            set_default_config(custom)
            assert get_default_config() is custom
        finally:
            set_default_config(previous)
