"""Database schema definition and ORM models.

A single ``documents`` table stores every collection. Documents are keyed by
``(collection, key)`` and carry their owner principal so configuration
lookups can be scoped to the relay's own identity.
"""

import logging

from sqlalchemy import Column, Index, Integer, LargeBinary, String, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from relay.domain.models import Document
from relay.utils.timestamps import parse_from_storage

logger = logging.getLogger(__name__)

Base = declarative_base()


class DocumentModel(Base):
    """ORM model for the documents table."""

    __tablename__ = "documents"

    collection = Column(String(255), primary_key=True, nullable=False)
    key = Column(String(255), primary_key=True, nullable=False)
    owner = Column(String(255), nullable=False)
    data = Column(LargeBinary, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_documents_owner", "owner", "collection"),)

    def to_domain(self) -> Document:
        return Document(
            collection=self.collection,
            key=self.key,
            owner=self.owner,
            data=bytes(self.data),
            version=self.version,
            created_at=parse_from_storage(self.created_at),
            updated_at=parse_from_storage(self.updated_at),
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
