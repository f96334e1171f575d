"""Bearer-token resolution for outbound notifications.

Two strategies, selected by configuration:
- EnvironmentCredentialResolver: one process environment variable
- StoreCredentialResolver: primary/fallback records in the ENV_VARS collection

Use the factory to build the configured one:
    from relay.credentials import get_credential_resolver
    resolver = get_credential_resolver(config.deployment.credential_strategy, config.credentials)
    token = resolver.resolve(owner)
"""

from .base import CredentialResolver
from .environment import EnvironmentCredentialResolver
from .factory import get_credential_resolver
from .store import DocumentLookup, StoreCredentialResolver, session_document_lookup

__all__ = [
    "CredentialResolver",
    "EnvironmentCredentialResolver",
    "StoreCredentialResolver",
    "DocumentLookup",
    "get_credential_resolver",
    "session_document_lookup",
]
