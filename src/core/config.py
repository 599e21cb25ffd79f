"""Configuration management for the SNS notification gateway.

This module holds the gateway configuration value, the allow-list
validation applied before any SNS client is created, and YAML
configuration loading with environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import yaml


SUPPORTED_PLATFORMS = frozenset({"HTTP"})

SUPPORTED_REGIONS = frozenset({"us-west-2"})


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


class UnsupportedPlatformError(ConfigurationError):
    """Raised when the platform is not in the supported set."""

    pass


class UnsupportedRegionError(ConfigurationError):
    """Raised when the region is not in the supported set."""

    pass


class InvalidCredentialError(ConfigurationError):
    """Raised when an access key id or secret access key is unusable."""

    pass


@dataclass(frozen=True)
class GatewayConfig:
    """Settings a notification gateway is constructed from."""

    platform: str
    region: str
    access_key_id: str
    secret_access_key: str = field(repr=False)
    api_version: Optional[str] = None


def validate_config(config: GatewayConfig) -> None:
    """Validate platform, region and credentials against the allow-lists.

    Args:
        config: Gateway configuration to check

    Raises:
        UnsupportedPlatformError: When platform is not supported
        UnsupportedRegionError: When region is not supported
        InvalidCredentialError: When a credential is not a non-empty string
    """
    if config.platform not in SUPPORTED_PLATFORMS:
        raise UnsupportedPlatformError(
            f'Unsupported platform "{config.platform}".'
        )
    if config.region not in SUPPORTED_REGIONS:
        raise UnsupportedRegionError(f'Unsupported region "{config.region}".')
    if not isinstance(config.access_key_id, str) or not config.access_key_id:
        raise InvalidCredentialError(
            f'Invalid access_key_id: "{config.access_key_id}".'
        )
    if not isinstance(config.secret_access_key, str) or not config.secret_access_key:
        # Never echo the secret itself
        raise InvalidCredentialError("Invalid secret_access_key.")


class Configuration:
    """Configuration management with YAML loading and validation.

    Loads the ``sns`` section of a YAML file, applies environment
    variable overrides and turns the result into a validated
    :class:`GatewayConfig`.
    """

    ENVIRONMENT_OVERRIDES = {
        "AWS_REGION": "sns.region",
        "AWS_ACCESS_KEY_ID": "sns.access_key_id",
        "AWS_SECRET_ACCESS_KEY": "sns.secret_access_key",
        "SNS_API_VERSION": "sns.api_version",
    }

    def __init__(self, config_path: Optional[str] = None) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file.
                        If None, auto-detects config.yaml in current directory.

        Raises:
            ConfigurationError: When configuration file is invalid
        """
        self._config: Dict[str, Any] = {}
        self._config_path = self._resolve_config_path(config_path)
        self._load_configuration()
        self._apply_environment_overrides()
        self._validate_configuration()

    def _resolve_config_path(self, config_path: Optional[str]) -> Path:
        """Resolve configuration file path.

        Args:
            config_path: Optional path to configuration file

        Returns:
            Resolved Path object to configuration file

        Raises:
            ConfigurationError: When configuration file not found
        """
        if config_path:
            path = Path(config_path)
        else:
            path = Path("config.yaml")
            if not path.exists():
                path = Path("config/settings.yaml")

        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}. "
                "Please create a configuration file or specify a valid path."
            )

        return path

    def _load_configuration(self) -> None:
        """Load configuration from YAML file.

        Raises:
            ConfigurationError: When YAML file is invalid
        """
        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file {self._config_path}: {e}"
            )
        except IOError as e:
            raise ConfigurationError(
                f"Unable to read configuration file {self._config_path}: {e}"
            )

        if not isinstance(self._config, dict):
            raise ConfigurationError(
                f"Configuration file {self._config_path} must contain a mapping"
            )

    def _apply_environment_overrides(self) -> None:
        """Apply environment variable overrides to configuration."""
        for variable, key_path in self.ENVIRONMENT_OVERRIDES.items():
            if variable in os.environ:
                self._set_nested_value(key_path, os.environ[variable])

    def _validate_configuration(self) -> None:
        """Validate configuration has the required section.

        Raises:
            ConfigurationError: When required fields are missing
        """
        if "sns" not in self._config:
            raise ConfigurationError("Required configuration section 'sns' is missing")

        if not isinstance(self._config["sns"], dict):
            raise ConfigurationError("Configuration section 'sns' must be a mapping")

        for name in ("platform", "region"):
            if name not in self._config["sns"]:
                raise ConfigurationError(f"Required field 'sns.{name}' is missing")

    def _set_nested_value(self, key_path: str, value: Any) -> None:
        """Set nested configuration value using dot notation.

        Args:
            key_path: Dot-separated key path (e.g., 'sns.region')
            value: Value to set
        """
        keys = key_path.split(".")
        current = self._config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated key path (e.g., 'sns.region')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        current = self._config

        try:
            for key in keys:
                current = current[key]
            return current
        except (KeyError, TypeError):
            return default

    def get_gateway_config(self) -> GatewayConfig:
        """Build and validate the gateway configuration.

        Returns:
            Validated GatewayConfig

        Raises:
            ConfigurationError: When a value is not supported
        """
        config = GatewayConfig(
            platform=self.get("sns.platform"),
            region=self.get("sns.region"),
            access_key_id=self.get("sns.access_key_id"),
            secret_access_key=self.get("sns.secret_access_key"),
            api_version=self.get("sns.api_version"),
        )
        validate_config(config)
        return config
