"""Non-fatal configuration checks."""

import warnings
from typing import List

from .models import RelayConfig


def check_for_warnings(config: RelayConfig) -> List[str]:
    """
    Check a validated configuration for likely mistakes.

    Args:
        config: Validated relay configuration

    Returns:
        List of warning messages
    """
    warning_messages = []

    if config.notifications.endpoint_url.startswith("http://"):
        warning_messages.append(
            "notifications.endpoint_url uses plain http; the bearer token will be sent unencrypted"
        )

    credentials = config.credentials
    if (
        config.deployment.credential_strategy == "store"
        and credentials.primary_document == credentials.fallback_document
    ):
        warning_messages.append(
            f"credentials.fallback_document equals primary_document "
            f"('{credentials.primary_document}'); the fallback lookup is redundant"
        )

    if config.deployment.trigger_collection not in ("email_requests", "demo"):
        warning_messages.append(
            f"Unusual trigger_collection '{config.deployment.trigger_collection}'; "
            "known deployments use 'email_requests' or 'demo'"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
