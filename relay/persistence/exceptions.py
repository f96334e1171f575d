"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can
catch every store failure with one except clause.
"""


class PersistenceError(Exception):
    """Base exception for document store errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Database connection or initialization failed (bad URL, unreadable file)."""

    pass


class DataIntegrityError(PersistenceError):
    """A constraint was violated while writing a document."""

    pass
