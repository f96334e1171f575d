"""Unit tests for the relay service.

Tests NotificationRelay for:
- The full decode, compose, resolve and deliver flow
- Early exit at each failing stage
- Error strings and error types on failed results
- Logged events
"""

import json
from unittest.mock import MagicMock, Mock

import pytest
import requests

from relay.credentials import EnvironmentCredentialResolver
from relay.notifications import (
    CredentialError,
    DeliveryClient,
    NotificationRelay,
    SerializationError,
)
from tests.helpers.http_stubs import make_response, make_session

ENDPOINT = "https://notifications.example.com/notifications/email"


@pytest.fixture
def mock_logger():
    return MagicMock()


@pytest.fixture
def resolver():
    return EnvironmentCredentialResolver(environ={"NOTIFICATIONS_TOKEN": "secret-token"})


def build_relay(session, resolver, logger=None):
    client = DeliveryClient(ENDPOINT, timeout=5.0, max_response_bytes=1000, session=session)
    return NotificationRelay(client=client, credential_resolver=resolver, logger_instance=logger)


def logged_events(log):
    events = []
    for method in (log.debug, log.info, log.warning, log.error):
        for c in method.call_args_list:
            events.append(c.kwargs.get("extra", {}).get("event"))
    return events


class TestSuccessfulRelay:
    def test_end_to_end_request(self, http_session, resolver, email_request_bytes):
        result = build_relay(http_session, resolver).relay("abc123", email_request_bytes, "relay")

        assert result.is_success()
        assert result.status == "sent"
        assert result.status_code == 200
        assert result.idempotency_key == "futura-abc123"
        assert result.error is None

        http_session.post.assert_called_once()
        args, kwargs = http_session.post.call_args
        assert args == (ENDPOINT,)
        assert kwargs["headers"] == {
            "Content-Type": "application/json",
            "Authorization": "Bearer secret-token",
            "idempotency-key": "futura-abc123",
        }
        assert kwargs["data"].startswith(b'{"from":"noreply@futura.app"')

        body = json.loads(kwargs["data"])
        assert body["to"] == "bob@example.com"
        assert body["subject"] == "Files shared with you"
        assert body["text"].startswith("Hello Bob,\n\nAlice has shared some files with you through Futura.")
        assert set(body) == {"from", "to", "subject", "text"}

    def test_empty_token_still_delivers(self, http_session, email_request_bytes):
        relay = build_relay(http_session, EnvironmentCredentialResolver(environ={}))

        result = relay.relay("abc123", email_request_bytes, "relay")

        assert result.is_success()
        assert http_session.post.call_args.kwargs["headers"]["Authorization"] == "Bearer "

    def test_custom_idempotency_prefix(self, http_session, resolver, email_request_bytes):
        client = DeliveryClient(ENDPOINT, session=http_session)
        relay = NotificationRelay(client, resolver, idempotency_prefix="staging")

        result = relay.relay("abc123", email_request_bytes, "relay")

        assert result.idempotency_key == "staging-abc123"
        assert http_session.post.call_args.kwargs["headers"]["idempotency-key"] == "staging-abc123"

    def test_logs_stage_events(self, http_session, resolver, email_request_bytes, mock_logger):
        build_relay(http_session, resolver, mock_logger).relay("abc123", email_request_bytes, "relay")

        events = logged_events(mock_logger)
        for event in (
            "relay.triggered",
            "relay.decode.succeeded",
            "relay.compose.succeeded",
            "relay.serialize.succeeded",
            "relay.delivery.succeeded",
        ):
            assert event in events

        mock_logger.info.assert_any_call(
            "Email function triggered for document key: abc123", extra={"event": "relay.triggered"}
        )


class TestFailedRelay:
    def test_decode_failure_makes_no_request(self, http_session, email_request_dict, mock_logger):
        del email_request_dict["to"]
        resolver = Mock()

        result = build_relay(http_session, resolver, mock_logger).relay(
            "abc123", json.dumps(email_request_dict).encode(), "relay"
        )

        assert not result.is_success()
        assert result.error == "Failed to decode email data: missing field `to`"
        assert result.error_type == "DecodeError"
        assert http_session.post.call_count == 0
        resolver.resolve.assert_not_called()
        assert "relay.decode.failed" in logged_events(mock_logger)

    def test_missing_document_data(self, http_session, resolver):
        result = build_relay(http_session, resolver).relay("abc123", None, "relay")

        assert result.error_type == "DecodeError"
        assert http_session.post.call_count == 0

    def test_empty_document_key_is_failed_result(self, http_session, email_request_bytes, mock_logger):
        result = build_relay(http_session, Mock(), mock_logger).relay(
            "", email_request_bytes, "relay"
        )

        assert result.status == "failed"
        assert result.error == "Failed to decode email data: document key is empty"
        assert result.error_type == "DecodeError"
        assert result.idempotency_key is None
        assert http_session.post.call_count == 0
        assert "relay.decode.failed" in logged_events(mock_logger)

    def test_credential_failure_makes_no_request(self, http_session, email_request_bytes, mock_logger):
        resolver = Mock()
        resolver.resolve.side_effect = CredentialError("ENV_VARS/prod: record not found")

        result = build_relay(http_session, resolver, mock_logger).relay("abc123", email_request_bytes, "relay")

        assert result.error_type == "CredentialError"
        assert result.error.startswith("Failed to resolve notifications token")
        assert http_session.post.call_count == 0
        assert "relay.credentials.failed" in logged_events(mock_logger)

    def test_resolver_receives_owner(self, http_session, email_request_bytes):
        resolver = Mock()
        resolver.resolve.return_value = "t"

        build_relay(http_session, resolver).relay("abc123", email_request_bytes, "relay-principal")

        resolver.resolve.assert_called_once_with("relay-principal")

    def test_serialization_failure(self, http_session, resolver, email_request_bytes, monkeypatch):
        def fail(payload):
            raise SerializationError("cannot encode")

        monkeypatch.setattr("relay.notifications.service.serialize_payload", fail)

        result = build_relay(http_session, resolver).relay("abc123", email_request_bytes, "relay")

        assert result.error == "Failed to serialize email payload: cannot encode"
        assert http_session.post.call_count == 0

    def test_remote_error(self, resolver, email_request_bytes, mock_logger):
        session = make_session(make_response(404, b"not found"))

        result = build_relay(session, resolver, mock_logger).relay("abc123", email_request_bytes, "relay")

        assert result.status == "failed"
        assert result.status_code == 404
        assert result.error == "Email API returned status 404: not found"
        assert result.error_type == "RemoteError"
        assert session.post.call_count == 1

        failure = mock_logger.error.call_args.kwargs["extra"]
        assert failure == {"event": "relay.remote.failed", "error_type": "RemoteError", "status_code": 404}

    def test_timeout(self, resolver, email_request_bytes, mock_logger):
        session = make_session()
        session.post.side_effect = requests.exceptions.ConnectTimeout("timed out")

        result = build_relay(session, resolver, mock_logger).relay("abc123", email_request_bytes, "relay")

        assert result.error == "HTTP request failed. RejectionCode: Timeout, Error: timed out"
        assert result.error_type == "TransportError"
        assert result.status_code is None
        assert session.post.call_count == 1
        assert mock_logger.error.call_args.kwargs["extra"]["rejection_reason"] == "Timeout"

    def test_each_invocation_is_independent(self, resolver, email_request_bytes):
        session = make_session(make_response(500, b"boom"), make_response(200, b""))
        relay = build_relay(session, resolver)

        first = relay.relay("abc123", email_request_bytes, "relay")
        second = relay.relay("abc123", email_request_bytes, "relay")

        assert not first.is_success()
        assert second.is_success()
        keys = [c.kwargs["headers"]["idempotency-key"] for c in session.post.call_args_list]
        assert keys == ["futura-abc123", "futura-abc123"]


def test_shared_files_scenario(http_session):
    """Document abc123 from Alice to Bob with token tok1."""
    raw = json.dumps(
        {
            "from": "a@x.com",
            "to": "b@x.com",
            "subject": "Shared!",
            "text": "",
            "user_name": "Alice",
            "recipient_name": "Bob",
        }
    ).encode()
    resolver = EnvironmentCredentialResolver(environ={"NOTIFICATIONS_TOKEN": "tok1"})

    result = build_relay(http_session, resolver).relay("abc123", raw, "relay")

    assert result.is_success()
    headers = http_session.post.call_args.kwargs["headers"]
    assert headers["idempotency-key"] == "futura-abc123"
    assert headers["Authorization"] == "Bearer tok1"
    body = json.loads(http_session.post.call_args.kwargs["data"])
    assert body["from"] == "a@x.com"
    assert body["to"] == "b@x.com"
    assert body["subject"] == "Shared!"
    assert body["text"].startswith("Hello Bob,\n\nAlice has shared some files with you through Futura.")
