"""Context propagation for structured logging.

Fields pushed here are merged into every log record emitted inside the
scope. The store is a ContextVar, so concurrent hook invocations running on
separate threads or tasks never see each other's fields.

Typical fields are ``hook``, ``collection``, ``document_key`` and
``idempotency_key``, pushed by the dispatcher and the relay service.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


# Fields shared by every record logged in the current invocation
LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Get the current logging context.

    Returns:
        Copy of the current context fields. Mutating it does not change
        the active context.
    """
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the logging context.

    Later values win over earlier ones with the same name. Use
    pop_log_context() to restore the previous state.

    Args:
        **kwargs: Key-value pairs to add to the logging context

    Returns:
        Token for restoring the previous context with pop_log_context()

    Example:
        >>> token = push_log_context(document_key="abc123", collection="email_requests")
        >>> # ... every record logged here carries both fields ...
        >>> pop_log_context(token)
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to a previous state.

    Args:
        token: Token returned from push_log_context()

    Example:
        >>> token = push_log_context(hook="on_set_doc")
        >>> # ... dispatch the hook ...
        >>> pop_log_context(token)
    """
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields.

    This is primarily useful for testing.
    """
    LogContextVar.set({})


class log_context:
    """Context manager for scoped logging context.

    Pushes the fields on entry and restores the previous context on exit,
    even if the body raises. Scopes nest: the dispatcher's ``hook`` and
    ``collection`` stay visible inside the relay's ``idempotency_key`` scope.

    Example:
        >>> with log_context(document_key="abc123"):
        ...     logger.info("Delivering notification")  # includes document_key
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
