"""Tests for YAML configuration loading."""

import pytest

from protoc_fetcher.config import (
    ConfigError,
    FetcherConfig,
    load_config,
    parse_config,
)
from protoc_fetcher.core.exceptions import ProtocFetcherError


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_optional_file(self, tmp_path):
        """Test missing optional file yields defaults."""
        config = load_config(tmp_path / "protoc-fetcher.yaml")
        assert config == FetcherConfig()

    def test_missing_required_file(self, tmp_path):
        """Test missing required file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "protoc-fetcher.yaml", required=True)

    def test_empty_file(self, tmp_path):
        """Test empty file yields defaults."""
        path = tmp_path / "protoc-fetcher.yaml"
        path.write_text("")
        assert load_config(path) == FetcherConfig()

    def test_full_file(self, tmp_path):
        """Test all settings are read from the namespaced mapping."""
        path = tmp_path / "protoc-fetcher.yaml"
        path.write_text(
            "protoc_fetcher:\n"
            "  download_timeout: 120\n"
            "  version_timeout: 5.5\n"
            "  use_lock: true\n"
            "  lock_timeout: 60\n"
        )

        config = load_config(path)

        assert config.download_timeout == 120.0
        assert config.version_timeout == 5.5
        assert config.use_lock is True
        assert config.lock_timeout == 60

    def test_invalid_yaml(self, tmp_path):
        """Test YAML syntax errors raise ConfigError."""
        path = tmp_path / "protoc-fetcher.yaml"
        path.write_text("protoc_fetcher: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)


class TestParseConfig:
    """Tests for parse_config()."""

    def test_defaults(self):
        """Test default values."""
        config = parse_config({})

        assert config.download_timeout is None
        assert config.version_timeout == 30.0
        assert config.use_lock is False
        assert config.lock_timeout == 300

    def test_top_level_keys(self):
        """Test settings may be given without the namespace key."""
        assert parse_config({"use_lock": True}).use_lock is True

    def test_null_download_timeout(self):
        """Test download_timeout may be explicitly disabled."""
        assert parse_config({"download_timeout": None}).download_timeout is None

    def test_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigError, match="mirror_url"):
            parse_config({"mirror_url": "https://example.com"})

    @pytest.mark.parametrize(
        "data",
        [
            {"download_timeout": -1},
            {"download_timeout": "fast"},
            {"version_timeout": 0},
            {"use_lock": "yes"},
            {"lock_timeout": -1},
            {"lock_timeout": "long"},
            {"lock_timeout": True},
            {"protoc_fetcher": ["not", "a", "mapping"]},
        ],
    )
    def test_invalid_values(self, data):
        """Test wrong types and ranges are rejected."""
        with pytest.raises(ConfigError):
            parse_config(data)

    def test_not_a_mapping(self):
        """Test non-mapping documents are rejected."""
        with pytest.raises(ConfigError):
            parse_config(["a", "b"])

    def test_config_error_is_fetcher_error(self):
        """Test ConfigError belongs to the package hierarchy."""
        assert issubclass(ConfigError, ProtocFetcherError)


class TestLockTimeout:
    """Tests for the lock_timeout setting."""

    def test_default_is_float(self):
        """Test the default matches the type entry_lock() takes."""
        assert isinstance(FetcherConfig().lock_timeout, float)

    @pytest.mark.parametrize("value,expected", [(60, 60.0), (1.5, 1.5), (0, 0.0)])
    def test_accepts_numbers(self, value, expected):
        """Test integer and fractional timeouts are both accepted as float."""
        config = parse_config({"lock_timeout": value})

        assert config.lock_timeout == expected
        assert isinstance(config.lock_timeout, float)
