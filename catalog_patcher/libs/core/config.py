"""
Configuration Management

Builds the run settings from built-in defaults, environment variables
(read through python-decouple, so a .env or settings.ini file also works),
an optional YAML configuration file and finally CLI flags.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from decouple import UndefinedValueError, config

from .constants import CatalogConstants, NetworkConstants, RegistryConstants, ToolConstants
from .exceptions import ConfigurationError
from ..data_models import PatcherSettings

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading, validation and merging"""

    # Configuration schema - defines expected structure and types
    CONFIG_SCHEMA = {
        'catalog': {
            'type': dict,
            'required': False,
            'fields': {
                'ocp_version': {'type': str, 'required': False},
                'bundle': {'type': str, 'required': False},
                'datagrepper_url': {'type': str, 'required': False},
            }
        },
        'registry': {
            'type': dict,
            'required': False,
            'fields': {
                'brew_registry': {'type': str, 'required': False},
                'iib_repository': {'type': str, 'required': False},
                'token_manager_url': {'type': str, 'required': False},
                'token_description': {'type': str, 'required': False},
                'create_token': {'type': bool, 'required': False},
            }
        },
        'global': {
            'type': dict,
            'required': False,
            'fields': {
                'skip_tls': {'type': bool, 'required': False},
                'debug': {'type': bool, 'required': False},
                'http_timeout': {'type': int, 'required': False},
                'tools_bin_dir': {'type': str, 'required': False},
            }
        },
    }

    # Settings field -> (config file section, environment variable, cast)
    SETTINGS_SOURCES = {
        'ocp_version': ('catalog', 'OCP_VERSION', str),
        'bundle': ('catalog', 'POWERMON_BUNDLE', str),
        'datagrepper_url': ('catalog', 'DATAGREPPER_URL', str),
        'brew_registry': ('registry', 'BREW_REGISTRY', str),
        'iib_repository': ('registry', 'IIB_REPOSITORY', str),
        'token_manager_url': ('registry', 'TOKEN_MANAGER_URL', str),
        'token_description': ('registry', 'TOKEN_DESCRIPTION', str),
        'create_token': ('registry', 'CREATE_TOKEN', bool),
        'skip_tls': ('global', 'SKIP_TLS', bool),
        'debug': ('global', 'DEBUG', bool),
        'http_timeout': ('global', 'HTTP_TIMEOUT', int),
        'tools_bin_dir': ('global', 'TOOLS_BIN_DIR', str),
    }

    DEFAULTS = {
        'ocp_version': CatalogConstants.DEFAULT_OCP_VERSION,
        'bundle': CatalogConstants.POWERMON_BUNDLE,
        'datagrepper_url': NetworkConstants.DATAGREPPER_URL,
        'brew_registry': RegistryConstants.BREW_REGISTRY,
        'iib_repository': RegistryConstants.IIB_REPOSITORY,
        'token_manager_url': RegistryConstants.TOKEN_MANAGER_URL,
        'token_description': RegistryConstants.TOKEN_DESCRIPTION,
        'create_token': False,
        'skip_tls': False,
        'debug': False,
        'http_timeout': NetworkConstants.DEFAULT_TIMEOUT,
        'tools_bin_dir': ToolConstants.DEFAULT_BIN_DIR,
    }

    def __init__(self, env_config=config):
        """
        Initialize configuration manager

        Args:
            env_config: decouple config callable used to read the environment
        """
        self.env_config = env_config
        self.config_data = {}

    def load_config(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file

        Args:
            config_path: Path to configuration file

        Returns:
            Dict containing configuration data

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        if not config_file.is_file():
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_file, 'r') as f:
                self.config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}")

        self._validate_config()
        logger.info(f"Successfully loaded configuration from {config_path}")

        return self.config_data

    def _validate_config(self) -> None:
        """
        Validate configuration structure and values

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not isinstance(self.config_data, dict):
            raise ConfigurationError("Configuration must be a dictionary")

        unknown = set(self.config_data) - set(self.CONFIG_SCHEMA)
        if unknown:
            raise ConfigurationError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

        self._validate_against_schema(self.config_data, self.CONFIG_SCHEMA, "config")

    def _validate_against_schema(self, data: Dict[str, Any], schema: Dict[str, Any], path: str = "") -> None:
        """
        Validate data against schema definition

        Args:
            data: Data to validate
            schema: Schema definition
            path: Current path for error reporting

        Raises:
            ConfigurationError: If data doesn't match schema
        """
        for key, field_schema in schema.items():
            current_path = f"{path}.{key}" if path else key

            if key in data:
                value = data[key]

                # Skip None values for optional fields
                if value is None and not field_schema.get('required', False):
                    continue

                expected_type = field_schema['type']
                # bool is an int subclass, so reject it explicitly for int fields
                if not isinstance(value, expected_type) or (expected_type is int and isinstance(value, bool)):
                    raise ConfigurationError(f"{current_path} must be a {expected_type.__name__}")

                if expected_type == dict and 'fields' in field_schema:
                    self._validate_against_schema(value, field_schema['fields'], current_path)

            elif field_schema.get('required', False):
                raise ConfigurationError(f"Required field {current_path} is missing")

    def get_value(self, key: str, default: Any = None) -> Any:
        """
        Get configuration file value by key

        Args:
            key: Configuration key (supports dot notation like 'catalog.ocp_version')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config_data
        try:
            for k in key.split('.'):
                value = value[k]
            return default if value is None else value
        except (KeyError, TypeError):
            return default

    def _from_environment(self, env_name: str, cast: type, default: Any) -> Any:
        """Read one environment variable, casting it like decouple does"""
        try:
            return self.env_config(env_name, default=default, cast=cast)
        except (ValueError, UndefinedValueError) as e:
            raise ConfigurationError(f"Invalid value for environment variable {env_name}: {e}")

    def build_settings(self, overrides: Optional[Dict[str, Any]] = None) -> PatcherSettings:
        """
        Merge defaults, environment, configuration file and CLI overrides

        Later sources win: defaults < environment < config file < overrides.
        Overrides whose value is None are ignored.

        Args:
            overrides: Values from the command line

        Returns:
            PatcherSettings for the run

        Raises:
            ConfigurationError: If a value cannot be used
        """
        overrides = overrides or {}
        values = {}

        for name, (section, env_name, cast) in self.SETTINGS_SOURCES.items():
            value = self._from_environment(env_name, cast, self.DEFAULTS[name])
            value = self.get_value(f"{section}.{name}", value)
            if overrides.get(name) is not None:
                value = overrides[name]
            values[name] = value

        if not values['ocp_version'] or not str(values['ocp_version']).strip():
            raise ConfigurationError("OCP version cannot be empty")
        if values['http_timeout'] <= 0:
            raise ConfigurationError(f"HTTP timeout must be positive, got {values['http_timeout']}")

        settings = PatcherSettings(**values)
        logger.debug(f"Effective settings: {settings}")
        return settings
