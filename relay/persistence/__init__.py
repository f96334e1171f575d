"""Document store persistence backed by SQLAlchemy.

Public API:
    - init_database(database_url) / get_session() / close_database() / get_engine()
    - DocumentRepository: get, get_owned, upsert, delete
    - PersistenceError and subclasses

Example usage:
    >>> from relay.persistence import init_database, get_session, DocumentRepository
    >>> init_database("sqlite:///./data/relay.db")
    >>> with get_session() as session:
    ...     document = DocumentRepository(session).get("ENV_VARS", "prod")
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import DocumentRepository

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "DocumentRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
