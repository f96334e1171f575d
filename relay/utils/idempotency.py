"""Idempotency key construction for outbound notifications."""

DEFAULT_PREFIX = "futura"


def build_idempotency_key(document_key: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Build the idempotency-key header value for a triggering document.

    The value depends only on the document key, so a redelivered event for
    the same document presents the same key and the receiver can drop it.

    Args:
        document_key: Key of the document that triggered the delivery
        prefix: Deployment prefix

    Returns:
        ``<prefix>-<document_key>``

    Example:
        >>> build_idempotency_key("abc123")
        'futura-abc123'
    """
    if not document_key:
        raise ValueError("document_key cannot be empty")
    return f"{prefix}-{document_key}"
