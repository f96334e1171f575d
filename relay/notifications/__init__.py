"""Email delivery pipeline for email-request documents.

- NotificationRelay: decode, compose, resolve and deliver for one document
- decode_email_request: raw document bytes -> EmailRequest
- MessageComposer / TemplateRenderer: EmailRequest -> EmailPayload
- DeliveryClient: single HTTPS POST with response classification
- RelayError and subclasses: the pipeline error taxonomy
"""

from .client import DeliveryClient, serialize_payload
from .composer import MessageComposer, TemplateRenderer
from .decoder import decode_email_request
from .models import (
    CredentialError,
    DecodeError,
    DeliveryResponse,
    DeliveryResult,
    RelayError,
    RemoteError,
    SerializationError,
    TransportError,
)
from .service import NotificationRelay

__all__ = [
    # Main service
    "NotificationRelay",
    # Components
    "DeliveryClient",
    "MessageComposer",
    "TemplateRenderer",
    "decode_email_request",
    "serialize_payload",
    # Results
    "DeliveryResponse",
    "DeliveryResult",
    # Exceptions
    "RelayError",
    "DecodeError",
    "SerializationError",
    "CredentialError",
    "TransportError",
    "RemoteError",
]
