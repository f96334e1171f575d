"""Local stand-in for the hosting runtime.

Writes documents through the persistence layer and then calls the matching
post-write hook. The write is committed before the hook runs, so a failed
notification never rolls back or blocks it.
"""

import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from relay.domain.models import Document
from relay.hooks.dispatcher import HookDispatcher
from relay.hooks.models import DocContext, DocDeleteContext, DocUpsert, DocVersion, HookResult
from relay.logging import get_logger
from relay.persistence import DocumentRepository, get_session

logger = get_logger(__name__, component="host")


@dataclass
class WriteOutcome:
    """A committed write and the result of the hook it triggered."""

    document: Optional[Document]
    hook: HookResult


class LocalDocumentHost:
    """Persists document mutations and invokes the dispatcher's hooks."""

    def __init__(
        self,
        dispatcher: HookDispatcher,
        session_scope: Callable[[], AbstractContextManager[Session]] = get_session,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.dispatcher = dispatcher
        self.session_scope = session_scope
        self.logger = logger_instance or logger

    def set_doc(self, caller: str, collection: str, key: str, data: bytes) -> WriteOutcome:
        """Create or replace one document, then fire ``on_set_doc``."""
        with self.session_scope() as session:
            document, context = self._upsert(DocumentRepository(session), caller, collection, key, data)

        hook = self.dispatcher.on_set_doc(context)
        self._report(hook)
        return WriteOutcome(document=document, hook=hook)

    def set_many_docs(
        self,
        caller: str,
        documents: Iterable[Tuple[str, str, bytes]],
    ) -> List[Document]:
        """Write several (collection, key, data) documents in one transaction, then fire ``on_set_many_docs``."""
        written: List[Document] = []
        contexts: List[DocContext] = []

        with self.session_scope() as session:
            repo = DocumentRepository(session)
            for collection, key, data in documents:
                document, context = self._upsert(repo, caller, collection, key, data)
                written.append(document)
                contexts.append(context)

        self._report(self.dispatcher.on_set_many_docs(contexts))
        return written

    def delete_doc(self, caller: str, collection: str, key: str) -> WriteOutcome:
        """Delete one document, then fire ``on_delete_doc``."""
        with self.session_scope() as session:
            deleted = DocumentRepository(session).delete(collection, key)

        context = DocDeleteContext(
            caller=caller,
            collection=collection,
            key=key,
            data=_to_version(deleted) if deleted is not None else None,
        )
        hook = self.dispatcher.on_delete_doc(context)
        self._report(hook)
        return WriteOutcome(document=deleted, hook=hook)

    def _upsert(
        self,
        repo: DocumentRepository,
        caller: str,
        collection: str,
        key: str,
        data: bytes,
    ) -> Tuple[Document, DocContext]:
        before = repo.get(collection, key)
        document = repo.upsert(collection, key, owner=caller, data=data)

        context = DocContext(
            caller=caller,
            collection=collection,
            key=key,
            data=DocUpsert(
                before=_to_version(before) if before is not None else None,
                after=_to_version(document),
            ),
        )
        return document, context

    def _report(self, hook: HookResult) -> None:
        if hook.is_success():
            return
        self.logger.warning(
            f"Hook {hook.event.value} failed; the write is kept: {hook.error}",
            extra={
                "event": "host.hook_failed",
                "collection": hook.collection,
                "document_key": hook.key,
            },
        )


def _to_version(document: Document) -> DocVersion:
    return DocVersion(owner=document.owner, data=document.data, version=document.version)
