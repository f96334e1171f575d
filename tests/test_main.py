"""Unit tests for the command-line entry point.

Tests main() including:
- Log level priority (CLI > env > config)
- validate, seed-token and set-doc commands
- Exit codes and error handling
"""

import json
from unittest.mock import patch

import pytest

from relay.config.environment import EnvironmentConfig
from relay.config.models import RelayConfig
from relay.main import load_runtime_config, main
from relay.persistence import DocumentRepository, close_database, get_session, init_database
from tests.helpers.http_stubs import make_response


@pytest.fixture
def cli_env(tmp_path, monkeypatch, restore_root_logger):
    """Run the CLI from an empty directory against a throwaway database."""
    monkeypatch.chdir(tmp_path)
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", db_url)
    for name in ("LOG_LEVEL", "RELAY_PRINCIPAL", "NOTIFICATIONS_TOKEN", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    return db_url


def read_document(db_url, collection, key):
    init_database(db_url)
    try:
        with get_session() as session:
            return DocumentRepository(session).get(collection, key)
    finally:
        close_database()


class TestLoadRuntimeConfig:
    """Log level priority: CLI > environment > config file."""

    def _patched(self, env_level, config_level="WARNING"):
        app_config = RelayConfig.model_validate({"logging": {"level": config_level}})
        return patch("relay.main.load_config", return_value=(app_config, EnvironmentConfig(log_level=env_level)))

    def test_cli_wins(self):
        with self._patched(env_level="ERROR"):
            _, env_config = load_runtime_config(None, "DEBUG")
        assert env_config.log_level == "DEBUG"

    def test_environment_beats_config(self):
        with self._patched(env_level="ERROR"):
            _, env_config = load_runtime_config(None, None)
        assert env_config.log_level == "ERROR"

    def test_config_used_last(self):
        with self._patched(env_level=None):
            _, env_config = load_runtime_config(None, None)
        assert env_config.log_level == "WARNING"


class TestValidateCommand:
    def test_valid_configuration(self, cli_env, capsys):
        assert main(["validate"]) == 0
        assert "Configuration is valid" in capsys.readouterr().out

    def test_invalid_configuration(self, cli_env, tmp_path, capsys):
        (tmp_path / "config.yaml").write_text("notifications:\n  timeout_seconds: -1\n")

        assert main(["validate"]) == 1
        assert "Configuration Error" in capsys.readouterr().err

    def test_missing_explicit_config(self, cli_env, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "missing.yaml"), "validate"]) == 1

    def test_command_required(self, cli_env):
        with pytest.raises(SystemExit):
            main([])


class TestSeedTokenCommand:
    def test_stores_credential_record(self, cli_env):
        assert main(["seed-token", "--document", "prod", "--token", "s3cret"]) == 0

        document = read_document(cli_env, "ENV_VARS", "prod")
        assert document.owner == "relay"
        assert json.loads(document.data) == {"NOTIFICATIONS_TOKEN": "s3cret"}

    def test_uses_relay_principal(self, cli_env, monkeypatch):
        monkeypatch.setenv("RELAY_PRINCIPAL", "relay-svc")

        assert main(["seed-token", "--document", "dev", "--token", "t"]) == 0

        assert read_document(cli_env, "ENV_VARS", "dev").owner == "relay-svc"


class TestSetDocCommand:
    @pytest.fixture
    def post(self):
        with patch("relay.notifications.client.requests.Session") as session_class:
            yield session_class.return_value.post

    def test_delivers_email_request(self, cli_env, tmp_path, post, email_request_bytes, monkeypatch):
        monkeypatch.setenv("NOTIFICATIONS_TOKEN", "tok")
        post.return_value = make_response(200, b"")
        data_file = tmp_path / "request.json"
        data_file.write_bytes(email_request_bytes)

        code = main(["set-doc", "--collection", "email_requests", "--key", "abc123", "--data", str(data_file)])

        assert code == 0
        assert post.call_count == 1
        assert post.call_args.kwargs["headers"]["idempotency-key"] == "futura-abc123"
        assert read_document(cli_env, "email_requests", "abc123").data == email_request_bytes

    def test_remote_failure_exit_code(self, cli_env, tmp_path, post, email_request_bytes, capsys):
        post.return_value = make_response(404, b"not found")
        data_file = tmp_path / "request.json"
        data_file.write_bytes(email_request_bytes)

        code = main(["set-doc", "--collection", "email_requests", "--key", "abc123", "--data", str(data_file)])

        assert code == 1
        assert "Email API returned status 404: not found" in capsys.readouterr().err
        assert read_document(cli_env, "email_requests", "abc123") is not None

    def test_other_collection_is_ignored(self, cli_env, tmp_path, post):
        data_file = tmp_path / "profile.json"
        data_file.write_bytes(b'{"name": "Alice"}')

        code = main(["set-doc", "--collection", "user_profiles", "--key", "alice", "--data", str(data_file)])

        assert code == 0
        post.assert_not_called()

    def test_missing_data_file(self, cli_env, tmp_path, capsys):
        code = main(
            ["set-doc", "--collection", "email_requests", "--key", "k", "--data", str(tmp_path / "nope.json")]
        )

        assert code == 1
        assert "Error" in capsys.readouterr().err
