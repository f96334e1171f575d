"""Shared fixtures for the relay test suite."""

import json
import logging

import pytest

from relay.logging.context import clear_log_context
from relay.persistence import close_database, init_database
from tests.helpers.http_stubs import make_response, make_session


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after configure_logging() runs."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def email_request_dict():
    """A complete email request record."""
    return {
        "from": "noreply@futura.app",
        "to": "bob@example.com",
        "subject": "Files shared with you",
        "text": "ignored seed",
        "user_name": "Alice",
        "recipient_name": "Bob",
    }


@pytest.fixture
def email_request_bytes(email_request_dict):
    """The email request record as stored document bytes."""
    return json.dumps(email_request_dict).encode("utf-8")


@pytest.fixture
def http_session():
    """A requests.Session stand-in whose POST answers 200 with an empty body."""
    return make_session(make_response(200, b""))


@pytest.fixture
def database(tmp_path):
    """Initialize a throwaway SQLite database for the test."""
    db_url = f"sqlite:///{tmp_path / 'relay.db'}"
    init_database(db_url)
    yield db_url
    close_database()
