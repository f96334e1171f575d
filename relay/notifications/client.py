"""HTTP client for the external notification API.

One POST per call, no retries. The caller owns retry policy, and in this
deployment nobody retries: the host surfaces the failure string instead.
"""

import time
from typing import Optional

import requests
from pydantic_core import PydanticSerializationError
from urllib3.exceptions import ReadTimeoutError

from relay.domain.models import EmailPayload
from relay.logging import get_logger

from .models import DeliveryResponse, RemoteError, SerializationError, TransportError

logger = get_logger(__name__, component="delivery")

# Small reads return as soon as bytes arrive, so the deadline is checked often.
# The body is capped at max_response_bytes, which keeps the loop short.
_READ_CHUNK_BYTES = 16


def serialize_payload(payload: EmailPayload) -> bytes:
    """Encode the payload as the JSON request body.

    Raises:
        SerializationError: If the payload cannot be encoded
    """
    try:
        return payload.model_dump_json(by_alias=True).encode("utf-8")
    except (PydanticSerializationError, UnicodeEncodeError) as e:
        raise SerializationError(str(e)) from e


class DeliveryClient:
    """Posts serialized email payloads to the notification endpoint.

    Attributes:
        endpoint_url: Full URL of the email notification endpoint
        timeout: Request timeout in seconds
        max_response_bytes: Largest response body accepted before the call
            is treated as a transport failure
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 5.0,
        max_response_bytes: int = 1000,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.max_response_bytes = max_response_bytes
        self._session = session or requests.Session()

    def build_headers(self, token: str, idempotency_key: str) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
            "idempotency-key": idempotency_key,
        }

    def send(self, body: bytes, token: str, idempotency_key: str) -> DeliveryResponse:
        """Issue the POST and classify the response.

        Args:
            body: Serialized EmailPayload
            token: Bearer token (may be empty under the environment strategy)
            idempotency_key: Deterministic key of the triggering document

        Returns:
            DeliveryResponse for any 2xx status

        Raises:
            TransportError: On timeout, connection failure or oversized response
            RemoteError: On any non-2xx status
        """
        logger.debug(
            f"HTTP POST request to {self.endpoint_url}",
            extra={
                "event": "delivery.request",
                "url": self.endpoint_url,
                "timeout": self.timeout,
                "body_bytes": len(body),
            },
        )

        # The timeout bounds the whole call, not each socket read
        deadline = time.monotonic() + self.timeout

        try:
            response = self._session.post(
                self.endpoint_url,
                data=body,
                headers=self.build_headers(token, idempotency_key),
                timeout=self.timeout,
                stream=True,
            )
            try:
                raw_body = self._read_bounded(response, deadline)
            finally:
                response.close()

        except requests.exceptions.RequestException as e:
            if not _is_timeout(e):
                logger.error(
                    f"Request to {self.endpoint_url} failed: {e}",
                    extra={
                        "event": "delivery.transport_error",
                        "error_type": type(e).__name__,
                        "url": self.endpoint_url,
                    },
                )
                raise TransportError(type(e).__name__, str(e)) from e

            self._log_timeout()
            raise TransportError("Timeout", str(e)) from e

        text = raw_body.decode("utf-8", errors="replace")
        status_code = response.status_code

        logger.debug(
            f"HTTP response received - Status: {status_code}",
            extra={
                "event": "delivery.response",
                "status_code": status_code,
                "response_bytes": len(raw_body),
            },
        )

        if 200 <= status_code < 300:
            return DeliveryResponse(status_code=status_code, body=text)

        raise RemoteError(status_code, text)

    def _read_bounded(self, response: requests.Response, deadline: float) -> bytes:
        """Read at most max_response_bytes of the body before the deadline.

        Headers may arrive in time while the body trickles in slowly, so the
        deadline is checked after the headers and after every chunk.

        Raises:
            TransportError: If the body is larger than the bound, or the
                deadline passes before the body is complete
        """
        self._check_deadline(deadline)

        received = bytearray()
        for chunk in response.iter_content(chunk_size=_READ_CHUNK_BYTES):
            self._check_deadline(deadline)
            received.extend(chunk)
            if len(received) > self.max_response_bytes:
                logger.warning(
                    "Response body exceeded size limit",
                    extra={
                        "event": "delivery.response_too_large",
                        "max_response_bytes": self.max_response_bytes,
                        "status_code": response.status_code,
                    },
                )
                raise TransportError(
                    "ResponseTooLarge",
                    f"response body exceeds {self.max_response_bytes} bytes",
                )
        return bytes(received)

    def _check_deadline(self, deadline: float) -> None:
        if time.monotonic() >= deadline:
            self._log_timeout()
            raise TransportError(
                "Timeout",
                f"no complete response within {self.timeout} seconds",
            )

    def _log_timeout(self) -> None:
        logger.warning(
            f"Request to {self.endpoint_url} timed out after {self.timeout} seconds",
            extra={"event": "delivery.timeout", "url": self.endpoint_url},
        )

    def close(self) -> None:
        self._session.close()


def _is_timeout(error: requests.exceptions.RequestException) -> bool:
    """True for timeouts, including read timeouts raised while streaming the body.

    requests re-raises a read timeout during ``iter_content`` as a
    ConnectionError wrapping urllib3's ReadTimeoutError.
    """
    if isinstance(error, requests.exceptions.Timeout):
        return True
    return bool(error.args) and isinstance(error.args[0], ReadTimeoutError)
