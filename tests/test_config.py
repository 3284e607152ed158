"""
Tests for configuration loading and merging
"""

import os
from unittest.mock import patch

import pytest

from catalog_patcher.libs.core import ConfigManager
from catalog_patcher.libs.core.exceptions import ConfigurationError

ENV_NAMES = [
    "OCP_VERSION", "POWERMON_BUNDLE", "DATAGREPPER_URL", "BREW_REGISTRY", "IIB_REPOSITORY",
    "TOKEN_MANAGER_URL", "TOKEN_DESCRIPTION", "CREATE_TOKEN", "SKIP_TLS", "DEBUG",
    "HTTP_TIMEOUT", "TOOLS_BIN_DIR",
]


@pytest.fixture(autouse=True)
def clean_environment():
    """Run every test without patcher variables from the caller's shell"""
    saved = {name: os.environ.pop(name) for name in ENV_NAMES if name in os.environ}
    yield
    for name in ENV_NAMES:
        os.environ.pop(name, None)
    os.environ.update(saved)


def write_config(tmp_path, content):
    config_file = tmp_path / "patcher.yaml"
    config_file.write_text(content)
    return str(config_file)


class TestBuildSettings:
    """Precedence of defaults, environment, file and CLI"""

    def test_defaults(self):
        settings = ConfigManager().build_settings()

        assert settings.ocp_version == "v4.13"
        assert settings.bundle == "power-monitoring-operator-bundle-container"
        assert settings.iib_prefix == "brew.registry.redhat.io/rh-osbs/iib"
        assert settings.token_manager_url == "https://employee-token-manager.registry.redhat.com/v1/tokens"
        assert settings.http_timeout == 30
        assert settings.create_token is False
        assert settings.skip_tls is False

    def test_environment_overrides_defaults(self):
        with patch.dict(os.environ, {"OCP_VERSION": "v4.15", "SKIP_TLS": "true", "HTTP_TIMEOUT": "90"}):
            settings = ConfigManager().build_settings()

        assert settings.ocp_version == "v4.15"
        assert settings.skip_tls is True
        assert settings.http_timeout == 90

    def test_config_file_overrides_environment(self, tmp_path):
        config_path = write_config(tmp_path, "catalog:\n  ocp_version: v4.14\nglobal:\n  debug: true\n")
        manager = ConfigManager()
        manager.load_config(config_path)

        with patch.dict(os.environ, {"OCP_VERSION": "v4.15"}):
            settings = manager.build_settings()

        assert settings.ocp_version == "v4.14"
        assert settings.debug is True

    def test_cli_overrides_everything(self, tmp_path):
        manager = ConfigManager()
        manager.load_config(write_config(tmp_path, "catalog:\n  ocp_version: v4.14\n"))

        with patch.dict(os.environ, {"OCP_VERSION": "v4.15"}):
            settings = manager.build_settings({"ocp_version": "v4.16", "skip_tls": None})

        assert settings.ocp_version == "v4.16"
        assert settings.skip_tls is False

    def test_invalid_environment_value(self):
        with patch.dict(os.environ, {"HTTP_TIMEOUT": "soon"}):
            with pytest.raises(ConfigurationError) as exc_info:
                ConfigManager().build_settings()
        assert "HTTP_TIMEOUT" in str(exc_info.value)

    def test_empty_version_rejected(self):
        with pytest.raises(ConfigurationError):
            ConfigManager().build_settings({"ocp_version": "  "})

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ConfigurationError):
            ConfigManager().build_settings({"http_timeout": 0})


class TestLoadConfig:
    """YAML file validation"""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager().load_config(str(tmp_path / "absent.yaml"))
        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager().load_config(write_config(tmp_path, "catalog: [unclosed\n"))
        assert "Invalid YAML" in str(exc_info.value)

    def test_wrong_type(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager().load_config(write_config(tmp_path, "global:\n  http_timeout: fast\n"))
        assert "config.global.http_timeout must be a int" in str(exc_info.value)

    def test_bool_is_not_an_int(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigManager().load_config(write_config(tmp_path, "global:\n  http_timeout: true\n"))

    def test_unknown_section(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager().load_config(write_config(tmp_path, "operator:\n  image: quay.io/x/y:1\n"))
        assert "operator" in str(exc_info.value)

    def test_empty_file_is_valid(self, tmp_path):
        manager = ConfigManager()
        assert manager.load_config(write_config(tmp_path, "")) == {}

    def test_get_value_dot_notation(self, tmp_path):
        manager = ConfigManager()
        manager.load_config(write_config(tmp_path, "registry:\n  create_token: true\n"))

        assert manager.get_value("registry.create_token") is True
        assert manager.get_value("registry.brew_registry", "fallback") == "fallback"
        assert manager.get_value("catalog.ocp_version") is None
