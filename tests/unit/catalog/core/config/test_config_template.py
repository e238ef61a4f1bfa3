"""Unit tests for config_template module."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.config.config_template import (
    apply_environment_overrides,
    load_templated_yaml,
    substitute_env_vars,
)

CONFIG_YAML = """
config:
  app:
    environment: test
    port: ${CATALOG_PORT:-8000}
    max_page_size: ${CATALOG_MAX_PAGE_SIZE:-50}
  database:
    url: "${DATABASE_URL:-sqlite:///./catalog.db}"
"""


class TestSubstituteEnvVars:
    """Test cases for substitute_env_vars function."""

    def test_substitute_simple_env_var(self):
        """Test substitution of a simple environment variable."""
        with patch.dict(os.environ, {"CATALOG_VAR": "value"}):
            assert substitute_env_vars("${CATALOG_VAR}") == "value"

    def test_substitute_env_var_in_text(self):
        """Test substitution of environment variables within text."""
        with patch.dict(os.environ, {"HOST": "localhost", "PORT": "8080"}):
            result = substitute_env_vars("http://${HOST}:${PORT}/products")
            assert result == "http://localhost:8080/products"

    def test_substitute_env_var_with_default(self):
        """Test substitution with default value when env var is not set."""
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-fallback}") == "fallback"
            assert substitute_env_vars("${MISSING_VAR:-}") == ""

    def test_substitute_required_env_var_missing(self):
        """Test substitution fails when required env var is missing."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(
                ValueError, match="Required environment variable MISSING_VAR not set"
            ):
                substitute_env_vars("${MISSING_VAR}")

    def test_substitute_env_var_with_custom_error(self):
        """Test substitution with custom error message."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="MISSING_VAR: needed for the store"):
                substitute_env_vars("${MISSING_VAR:?needed for the store}")

    def test_text_without_placeholders_unchanged(self):
        assert substitute_env_vars("plain: value") == "plain: value"


class TestEnvironmentOverrides:

    def test_prefixed_variables_are_promoted(self):
        """TEST_X becomes X when running in the test environment."""
        with patch.dict(os.environ, {"TEST_CATALOG_PORT": "9000"}):
            os.environ.pop("CATALOG_PORT", None)

            apply_environment_overrides("test")

            assert os.environ["CATALOG_PORT"] == "9000"

    def test_other_environments_are_ignored(self):
        with patch.dict(os.environ, {"PRODUCTION_CATALOG_PORT": "9000"}):
            os.environ.pop("CATALOG_PORT", None)

            apply_environment_overrides("test")

            assert "CATALOG_PORT" not in os.environ


class TestLoadTemplatedYaml:

    @pytest.fixture(autouse=True)
    def restore_environ(self):
        # Loading promotes prefixed variables into os.environ
        with patch.dict(os.environ):
            yield

    def test_load_valid_config(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(CONFIG_YAML)

        with patch.dict(
            os.environ,
            {"APP_ENVIRONMENT": "test", "CATALOG_MAX_PAGE_SIZE": "25"},
        ):
            config = load_templated_yaml(config_file)

        assert isinstance(config, ConfigData)
        assert config.app.environment == "test"
        assert config.app.port == 8000
        assert config.app.max_page_size == 25

    def test_environment_prefixed_value_wins(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(CONFIG_YAML)

        with patch.dict(
            os.environ,
            {
                "APP_ENVIRONMENT": "test",
                "DATABASE_URL": "sqlite:///./dev.db",
                "TEST_DATABASE_URL": "sqlite:///./test.db",
            },
        ):
            config = load_templated_yaml(config_file)

        assert config.database.url == "sqlite:///./test.db"

    def test_missing_sections_use_defaults(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("config:\n  app:\n    port: 9001\n")

        config = load_templated_yaml(config_file)

        assert config.app.port == 9001
        assert config.app.max_page_size == 100
        assert config.logging.level == "INFO"

    def test_empty_file(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        with pytest.raises(ValueError, match="Failed to parse YAML"):
            load_templated_yaml(config_file)

    def test_malformed_yaml(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("config:\n  app: [unclosed\n")

        with pytest.raises(ValueError, match="Error parsing YAML"):
            load_templated_yaml(config_file)

    def test_invalid_value(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("config:\n  app:\n    max_page_size: 0\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(config_file)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_templated_yaml(tmp_path / "absent.yaml")

    def test_url_with_colons_is_substituted_as_a_string(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(CONFIG_YAML)

        with patch.dict(os.environ, {"DATABASE_URL": "sqlite:///:memory:"}):
            os.environ.pop("TEST_DATABASE_URL", None)
            config = load_templated_yaml(config_file)

        assert config.database.url == "sqlite:///:memory:"


class TestShippedConfig:
    """The config.yaml at the repository root must load as-is."""

    CONFIG_PATH = Path(__file__).resolve().parents[5] / "config.yaml"

    @pytest.fixture(autouse=True)
    def restore_environ(self):
        with patch.dict(os.environ):
            os.environ.pop("TEST_DATABASE_URL", None)
            yield

    def test_loads_with_defaults(self):
        for name in (
            "DATABASE_URL",
            "DATABASE_PASSWORD_FILE",
            "LOG_FILE",
            "APP_MAX_PAGE_SIZE",
        ):
            os.environ.pop(name, None)

        config = load_templated_yaml(self.CONFIG_PATH)

        assert config.database.url == "sqlite:///./catalog.db"
        assert config.database.password is None
        assert not config.logging.file
        assert config.app.max_page_size == 100

    def test_loads_with_in_memory_database(self):
        os.environ["DATABASE_URL"] = "sqlite:///:memory:"
        os.environ["APP_MAX_PAGE_SIZE"] = "20"

        config = load_templated_yaml(self.CONFIG_PATH)

        assert config.database.url == "sqlite:///:memory:"
        assert config.app.max_page_size == 20
