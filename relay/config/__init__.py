"""Configuration management for the notification relay."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_config, validate_config_file
from .models import (
    CredentialsConfig,
    CredentialStrategy,
    DeploymentConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    NotificationsConfig,
    RelayConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "parse_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "RelayConfig",
    "DeploymentConfig",
    "NotificationsConfig",
    "CredentialsConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "CredentialStrategy",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
