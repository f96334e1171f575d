"""Factory for the configured credential strategy."""

import logging
from typing import Mapping, Optional

from relay.config.models import CredentialsConfig, CredentialStrategy

from .base import CredentialResolver
from .environment import EnvironmentCredentialResolver
from .store import DocumentLookup, StoreCredentialResolver, session_document_lookup

logger = logging.getLogger(__name__)


def get_credential_resolver(
    strategy: str,
    credentials_config: CredentialsConfig,
    environ: Optional[Mapping[str, str]] = None,
    lookup: Optional[DocumentLookup] = None,
) -> CredentialResolver:
    """Instantiate the resolver for a credential strategy.

    Args:
        strategy: "environment" or "store"
        credentials_config: Variable name, collection and record ids
        environ: Environment mapping for the environment strategy (defaults to os.environ)
        lookup: Document lookup for the store strategy (defaults to the SQLAlchemy store)

    Raises:
        ValueError: If the strategy is not supported
    """
    strategy_value = strategy.value if isinstance(strategy, CredentialStrategy) else str(strategy)

    logger.debug("Creating credential resolver", extra={"strategy": strategy_value})

    if strategy_value == CredentialStrategy.ENVIRONMENT.value:
        return EnvironmentCredentialResolver(
            env_var=credentials_config.env_var,
            environ=environ,
        )

    if strategy_value == CredentialStrategy.STORE.value:
        return StoreCredentialResolver(
            lookup=lookup or session_document_lookup(),
            collection=credentials_config.collection,
            primary_document=credentials_config.primary_document,
            fallback_document=credentials_config.fallback_document,
            token_field=credentials_config.token_field,
        )

    supported = ", ".join(s.value for s in CredentialStrategy)
    raise ValueError(f"Unknown credential strategy: {strategy}. Supported strategies: {supported}")
