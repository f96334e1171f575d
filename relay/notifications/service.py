"""Relay service: turns one email-request document into one delivery attempt.

Steps, each of which may end the invocation with a failed result:
1. Decode the raw document into an EmailRequest
2. Compose the EmailPayload from the fixed template
3. Serialize the payload to JSON
4. Resolve the bearer token
5. POST to the notification API and classify the response

No step is retried and nothing is recovered locally.
"""

import logging
from typing import Optional, Union

from relay.credentials.base import CredentialResolver
from relay.logging import get_logger
from relay.logging.context import log_context
from relay.utils.idempotency import DEFAULT_PREFIX, build_idempotency_key

from .client import DeliveryClient, serialize_payload
from .composer import MessageComposer
from .decoder import decode_email_request
from .models import DecodeError, DeliveryResult, RelayError, RemoteError, TransportError

logger = get_logger(__name__, component="relay")


class NotificationRelay:
    """Runs the decode, compose, resolve and deliver pipeline for one document.

    Holds only configuration and collaborators, so a single instance can
    serve concurrent hook invocations.
    """

    def __init__(
        self,
        client: DeliveryClient,
        credential_resolver: CredentialResolver,
        composer: Optional[MessageComposer] = None,
        idempotency_prefix: str = DEFAULT_PREFIX,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.credential_resolver = credential_resolver
        self.composer = composer or MessageComposer()
        self.idempotency_prefix = idempotency_prefix
        self.logger = logger_instance or logger

    def relay(
        self,
        document_key: str,
        raw_data: Optional[Union[bytes, str]],
        owner: str,
    ) -> DeliveryResult:
        """Deliver the email described by one stored document.

        Args:
            document_key: Key of the triggering document
            raw_data: Raw JSON body of the document's new version
            owner: Principal used to scope credential lookups

        Returns:
            DeliveryResult with status "sent" or "failed"
        """
        idempotency_key = (
            build_idempotency_key(document_key, self.idempotency_prefix) if document_key else None
        )

        with log_context(document_key=document_key, idempotency_key=idempotency_key):
            self.logger.info(
                f"Email function triggered for document key: {document_key}",
                extra={"event": "relay.triggered"},
            )

            try:
                if idempotency_key is None:
                    raise DecodeError("document key is empty")

                request = decode_email_request(raw_data)
                self.logger.info(
                    f"Decoded email data for: {request.user_name} -> {request.recipient_name}",
                    extra={"event": "relay.decode.succeeded"},
                )

                payload = self.composer.compose(request)
                self.logger.info(
                    f"Email payload created - From: {payload.from_}, To: {payload.to}, "
                    f"Subject: {payload.subject}",
                    extra={"event": "relay.compose.succeeded"},
                )

                body = serialize_payload(payload)
                self.logger.debug(
                    f"Email payload serialized, length: {len(body)} bytes",
                    extra={"event": "relay.serialize.succeeded", "body_bytes": len(body)},
                )

                token = self.credential_resolver.resolve(owner)

                response = self.client.send(body, token, idempotency_key)

            except RelayError as e:
                self._log_failure(e)
                return DeliveryResult.failed(document_key, e, idempotency_key)

            self.logger.info(
                f"Email sent successfully to {payload.to}",
                extra={
                    "event": "relay.delivery.succeeded",
                    "status_code": response.status_code,
                },
            )
            return DeliveryResult(
                document_key=document_key,
                status="sent",
                idempotency_key=idempotency_key,
                status_code=response.status_code,
            )

    def _log_failure(self, error: RelayError) -> None:
        extra = {
            "event": f"relay.{error.stage}.failed",
            "error_type": type(error).__name__,
        }

        if isinstance(error, RemoteError):
            extra["status_code"] = error.status_code
        elif isinstance(error, TransportError):
            extra["rejection_reason"] = error.reason

        self.logger.error(str(error), extra=extra)
