"""Token resolution from the process environment."""

import logging
import os
from typing import Mapping, Optional

from relay.logging import get_logger

from .base import CredentialResolver

logger = get_logger(__name__, component="credentials")


class EnvironmentCredentialResolver(CredentialResolver):
    """Reads the token from one environment variable at call time.

    An unset variable resolves to the empty string; this strategy never fails.
    """

    STRATEGY = "environment"

    def __init__(
        self,
        env_var: str = "NOTIFICATIONS_TOKEN",
        environ: Optional[Mapping[str, str]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.env_var = env_var
        self.environ = os.environ if environ is None else environ
        self.logger = logger_instance or logger

    def resolve(self, owner: str) -> str:
        token = self.environ.get(self.env_var, "")
        self.logger.info(
            f"Auth token present: {'YES' if token else 'NO'}",
            extra={
                "event": "credentials.resolved",
                "strategy": self.STRATEGY,
                "token_present": bool(token),
            },
        )
        return token
