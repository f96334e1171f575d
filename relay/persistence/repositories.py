"""Repository for document reads and writes.

Returns domain Documents rather than ORM models. The caller owns the session
and the transaction.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from relay.domain.models import Document
from relay.utils.timestamps import format_for_storage, utc_now

from .exceptions import DataIntegrityError, PersistenceError
from .schema import DocumentModel

logger = logging.getLogger(__name__)


class DocumentRepository:
    """Repository for document operations."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, collection: str, key: str) -> Optional[Document]:
        """Retrieve a document by collection and key.

        Returns:
            Document if found, None otherwise

        Raises:
            PersistenceError: If a database error occurs
        """
        try:
            model = self.session.get(DocumentModel, (collection, key))
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving document {collection}/{key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve document: {e}") from e

    def get_owned(self, owner: str, collection: str, key: str) -> Optional[Document]:
        """Retrieve a document only if it belongs to owner.

        A document owned by another principal is reported as absent.

        Raises:
            PersistenceError: If a database error occurs
        """
        try:
            stmt = select(DocumentModel).where(
                DocumentModel.collection == collection,
                DocumentModel.key == key,
                DocumentModel.owner == owner,
            )
            model = self.session.execute(stmt).scalar_one_or_none()
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(
                f"Error retrieving document {collection}/{key} for owner {owner}: {e}",
                exc_info=True,
            )
            raise PersistenceError(f"Failed to retrieve document: {e}") from e

    def upsert(self, collection: str, key: str, owner: str, data: bytes) -> Document:
        """Insert a new document or replace the data of an existing one.

        Existing documents keep their owner and creation time and get their
        version bumped.

        Returns:
            The persisted Document

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If another database error occurs
        """
        now = format_for_storage(utc_now())
        try:
            existing = self.session.get(DocumentModel, (collection, key))

            if existing:
                existing.data = data
                existing.version = existing.version + 1
                existing.updated_at = now
                model = existing
                logger.debug(f"Updated document {collection}/{key} (version {model.version})")
            else:
                model = DocumentModel(
                    collection=collection,
                    key=key,
                    owner=owner,
                    data=data,
                    version=1,
                    created_at=now,
                    updated_at=now,
                )
                self.session.add(model)
                logger.debug(f"Inserted document {collection}/{key}")

            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting document {collection}/{key}: {e}")
            raise DataIntegrityError(f"Failed to upsert document: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting document {collection}/{key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert document: {e}") from e

    def delete(self, collection: str, key: str) -> Optional[Document]:
        """Delete a document.

        Returns:
            The deleted Document, or None if it did not exist

        Raises:
            PersistenceError: If a database error occurs
        """
        try:
            model = self.session.get(DocumentModel, (collection, key))
            if model is None:
                return None

            document = model.to_domain()
            self.session.delete(model)
            self.session.flush()
            logger.debug(f"Deleted document {collection}/{key}")
            return document

        except SQLAlchemyError as e:
            logger.error(f"Error deleting document {collection}/{key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete document: {e}") from e
