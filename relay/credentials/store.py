"""Token resolution from configuration records in the document store.

Supports a staged deployment where one artifact picks up different secrets
without redeploying: the primary record is tried first and the fallback
record only after the primary is conclusively absent or invalid.
"""

import json
import logging
from contextlib import AbstractContextManager
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from relay.domain.models import Document
from relay.logging import get_logger
from relay.notifications.models import CredentialError
from relay.persistence import DocumentRepository, PersistenceError, get_session

from .base import CredentialResolver

logger = get_logger(__name__, component="credentials")

# (owner, collection, key) -> Document or None
DocumentLookup = Callable[[str, str, str], Optional[Document]]


def session_document_lookup(
    session_scope: Callable[[], AbstractContextManager[Session]] = get_session,
) -> DocumentLookup:
    """Build a lookup that reads owner-scoped documents through the repository."""

    def lookup(owner: str, collection: str, key: str) -> Optional[Document]:
        with session_scope() as session:
            return DocumentRepository(session).get_owned(owner, collection, key)

    return lookup


class StoreCredentialResolver(CredentialResolver):
    """Reads the token from a primary or fallback configuration record.

    Attributes:
        collection: Collection holding configuration records (ENV_VARS)
        primary_document: Key of the record tried first
        fallback_document: Key of the record tried when the primary fails
        token_field: Field of the decoded record holding the token
    """

    STRATEGY = "store"

    def __init__(
        self,
        lookup: DocumentLookup,
        collection: str = "ENV_VARS",
        primary_document: str = "prod",
        fallback_document: str = "dev",
        token_field: str = "NOTIFICATIONS_TOKEN",
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.lookup = lookup
        self.collection = collection
        self.primary_document = primary_document
        self.fallback_document = fallback_document
        self.token_field = token_field
        self.logger = logger_instance or logger

    def resolve(self, owner: str) -> str:
        failures: List[str] = []

        for position, document_id in enumerate((self.primary_document, self.fallback_document)):
            if position > 0:
                self.logger.warning(
                    f"Primary credential record unavailable, falling back to '{document_id}'",
                    extra={
                        "event": "credentials.fallback",
                        "collection": self.collection,
                        "document_id": document_id,
                        "reason": failures[-1],
                    },
                )

            try:
                token = self._read_token(owner, document_id)
            except _LookupFailed as e:
                failures.append(f"{self.collection}/{document_id}: {e}")
                continue

            self.logger.info(
                "Auth token resolved from store",
                extra={
                    "event": "credentials.resolved",
                    "strategy": self.STRATEGY,
                    "collection": self.collection,
                    "document_id": document_id,
                    "token_present": bool(token),
                },
            )
            return token

        self.logger.error(
            "No credential record could be resolved",
            extra={"event": "credentials.failed", "collection": self.collection},
        )
        raise CredentialError("; ".join(failures))

    def _read_token(self, owner: str, document_id: str) -> str:
        try:
            document = self.lookup(owner, self.collection, document_id)
        except PersistenceError as e:
            raise _LookupFailed(f"store read failed ({e})") from e

        if document is None:
            raise _LookupFailed("record not found")

        try:
            record = json.loads(document.data)
        except (ValueError, UnicodeDecodeError) as e:
            raise _LookupFailed(f"record is not valid JSON ({e})") from e

        if not isinstance(record, dict):
            raise _LookupFailed("record is not a JSON object")

        if self.token_field not in record:
            raise _LookupFailed(f"missing field `{self.token_field}`")

        token = record[self.token_field]
        if not isinstance(token, str):
            raise _LookupFailed(f"field `{self.token_field}` is not a string")

        return token


class _LookupFailed(Exception):
    """One record could not yield a token; the next candidate may be tried."""
