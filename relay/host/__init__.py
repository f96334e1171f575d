"""Local host adapter that persists documents and fires the mutation hooks."""

from .local import LocalDocumentHost, WriteOutcome

__all__ = ["LocalDocumentHost", "WriteOutcome"]
