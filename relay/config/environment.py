"""Environment variable loading and validation.

The delivery token is deliberately absent here: it is read per invocation by
the environment credential resolver, never captured at startup.
"""

import os
from typing import Mapping, Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/relay.db"
DEFAULT_PRINCIPAL = "relay"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
        principal: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.log_level = log_level
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.principal = principal or DEFAULT_PRINCIPAL
        self.environment = environment or "local"


def load_environment_config(environ: Optional[Mapping[str, str]] = None) -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Optional environment variables:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - DATABASE_URL: Document store URL (default: sqlite:///./data/relay.db)
    - RELAY_PRINCIPAL: Owner principal used for credential lookups (default: relay)
    - ENVIRONMENT: Environment label for logs (default: local)

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    environ = os.environ if environ is None else environ
    errors = []

    log_level = environ.get("LOG_LEVEL") or None
    database_url = environ.get("DATABASE_URL") or None
    principal = environ.get("RELAY_PRINCIPAL") or None
    environment = environ.get("ENVIRONMENT") or None

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if principal is not None and not principal.strip():
        errors.append("RELAY_PRINCIPAL cannot be whitespace-only")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; every variable has a default",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level.upper() if log_level else None,
        database_url=database_url,
        principal=principal.strip() if principal else None,
        environment=environment,
    )
