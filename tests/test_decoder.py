"""Tests for decoding stored documents into EmailRequest values."""

import json

import pytest

from relay.domain.models import EmailRequest
from relay.notifications import DecodeError, decode_email_request

REQUIRED_FIELDS = ["from", "to", "subject", "text", "user_name", "recipient_name"]


class TestDecodeSuccess:
    """Well-formed documents decode completely."""

    def test_decodes_all_fields(self, email_request_bytes):
        request = decode_email_request(email_request_bytes)

        assert isinstance(request, EmailRequest)
        assert request.from_ == "noreply@futura.app"
        assert request.to == "bob@example.com"
        assert request.subject == "Files shared with you"
        assert request.text == "ignored seed"
        assert request.user_name == "Alice"
        assert request.recipient_name == "Bob"

    def test_accepts_str_input(self, email_request_dict):
        request = decode_email_request(json.dumps(email_request_dict))
        assert request.recipient_name == "Bob"

    def test_ignores_unknown_fields(self, email_request_dict):
        email_request_dict["cc"] = "carol@example.com"
        email_request_dict["priority"] = 5

        request = decode_email_request(json.dumps(email_request_dict).encode())

        assert request.to == "bob@example.com"
        assert not hasattr(request, "cc")

    def test_accepts_empty_strings(self, email_request_dict):
        email_request_dict["text"] = ""
        email_request_dict["subject"] = ""

        request = decode_email_request(json.dumps(email_request_dict).encode())

        assert request.text == ""
        assert request.subject == ""

    def test_request_is_immutable(self, email_request_bytes):
        request = decode_email_request(email_request_bytes)
        with pytest.raises(Exception):
            request.to = "mallory@example.com"


class TestDecodeFailure:
    """Any malformed document is rejected as a whole."""

    @pytest.mark.parametrize("field", REQUIRED_FIELDS)
    def test_missing_field(self, email_request_dict, field):
        del email_request_dict[field]

        with pytest.raises(DecodeError) as exc_info:
            decode_email_request(json.dumps(email_request_dict).encode())

        message = str(exc_info.value)
        assert message.startswith("Failed to decode email data: ")
        assert f"missing field `{field}`" in message

    def test_missing_to_matches_diagnostic(self, email_request_dict):
        del email_request_dict["to"]

        with pytest.raises(DecodeError) as exc_info:
            decode_email_request(json.dumps(email_request_dict).encode())

        assert exc_info.value.cause == "missing field `to`"

    @pytest.mark.parametrize("value", [42, None, ["bob@example.com"], {"name": "Bob"}, True])
    def test_non_string_field(self, email_request_dict, value):
        email_request_dict["recipient_name"] = value

        with pytest.raises(DecodeError, match="recipient_name"):
            decode_email_request(json.dumps(email_request_dict).encode())

    def test_invalid_json(self):
        with pytest.raises(DecodeError, match="invalid JSON"):
            decode_email_request(b"{not json")

    def test_empty_body(self):
        with pytest.raises(DecodeError, match="invalid JSON"):
            decode_email_request(b"")

    def test_json_array_rejected(self):
        with pytest.raises(DecodeError):
            decode_email_request(b'["bob@example.com"]')

    def test_none_data(self):
        with pytest.raises(DecodeError, match="document has no data"):
            decode_email_request(None)

    def test_several_missing_fields_reported_together(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_email_request(b'{"from": "a@b.c"}')

        message = str(exc_info.value)
        assert "missing field `to`" in message
        assert "missing field `recipient_name`" in message
