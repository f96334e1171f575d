"""Base class for bearer-token resolvers."""

from abc import ABC, abstractmethod


class CredentialResolver(ABC):
    """Resolves the bearer token for one delivery attempt.

    Implementations are called once per hook invocation and must not cache
    the token between calls.
    """

    STRATEGY = "base"

    @abstractmethod
    def resolve(self, owner: str) -> str:
        """Return the bearer token.

        Args:
            owner: Principal whose configuration records may be read

        Raises:
            CredentialError: If the strategy cannot produce a token
        """
        pass
