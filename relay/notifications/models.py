"""Result types and the error taxonomy of the delivery pipeline.

Every failure is raised at its origin as a RelayError subclass carrying a
stage-specific diagnostic, then caught once by NotificationRelay and turned
into a failed DeliveryResult.
"""

from dataclasses import dataclass
from typing import Optional


class RelayError(Exception):
    """Base exception for delivery pipeline errors."""

    stage = "pipeline"


class DecodeError(RelayError):
    """The triggering document is malformed or incomplete."""

    stage = "decode"

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"Failed to decode email data: {cause}")


class SerializationError(RelayError):
    """The email payload could not be encoded to JSON."""

    stage = "serialize"

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"Failed to serialize email payload: {cause}")


class CredentialError(RelayError):
    """No bearer token could be resolved."""

    stage = "credentials"

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"Failed to resolve notifications token: {cause}")


class TransportError(RelayError):
    """The outbound call did not complete (timeout, connection failure, oversized response)."""

    stage = "transport"

    def __init__(self, reason: str, message: str):
        self.reason = reason
        self.message = message
        super().__init__(f"HTTP request failed. RejectionCode: {reason}, Error: {message}")


class RemoteError(RelayError):
    """The notification API answered with a non-2xx status."""

    stage = "remote"

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Email API returned status {status_code}: {body}")


@dataclass(frozen=True)
class DeliveryResponse:
    """A 2xx response from the notification API."""

    status_code: int
    body: str


@dataclass
class DeliveryResult:
    """Outcome of relaying one email-request document.

    Attributes:
        document_key: Key of the triggering document
        status: "sent" or "failed"
        idempotency_key: Header value presented to the API (None if never built)
        error: Diagnostic string for failures
        error_type: Name of the RelayError subclass for failures
        status_code: HTTP status when a response was received
    """

    document_key: str
    status: str  # "sent", "failed"
    idempotency_key: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    status_code: Optional[int] = None

    def is_success(self) -> bool:
        return self.status == "sent"

    @classmethod
    def failed(
        cls,
        document_key: str,
        error: RelayError,
        idempotency_key: Optional[str] = None,
    ) -> "DeliveryResult":
        """Build a failed result from a pipeline error."""
        return cls(
            document_key=document_key,
            status="failed",
            idempotency_key=idempotency_key,
            error=str(error),
            error_type=type(error).__name__,
            status_code=getattr(error, "status_code", None),
        )
