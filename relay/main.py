"""Command-line entry point for the notification relay."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from relay.config.environment import EnvironmentConfig
from relay.config.exceptions import ConfigurationError
from relay.config.loader import load_config
from relay.config.models import RelayConfig
from relay.hooks import build_dispatcher
from relay.host import LocalDocumentHost
from relay.logging import get_logger
from relay.logging.config import configure_logging
from relay.persistence import DocumentRepository, PersistenceError, close_database, get_session, init_database

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[RelayConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Args:
        config_path: Path to configuration file (None searches the defaults)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (RelayConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notification-relay",
        description="Futura notification relay - sends an email for every new email request document",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("validate", help="Validate configuration and exit")

    seed = commands.add_parser(
        "seed-token", help="Store a notifications token in a configuration record"
    )
    seed.add_argument("--document", required=True, help="Configuration record id (e.g. prod, dev)")
    seed.add_argument("--token", required=True, help="Bearer token to store")

    set_doc = commands.add_parser(
        "set-doc", help="Write a document through the local host and fire its hooks"
    )
    set_doc.add_argument("--collection", required=True)
    set_doc.add_argument("--key", required=True)
    set_doc.add_argument("--data", type=Path, required=True, help="File with the document body")
    set_doc.add_argument(
        "--caller", default=None, help="Principal performing the write (default: relay principal)"
    )

    return parser


def seed_token(app_config: RelayConfig, env_config: EnvironmentConfig, document_id: str, token: str) -> int:
    """Write {token_field: token} into the credential collection, owned by the relay principal."""
    credentials = app_config.credentials
    body = json.dumps({credentials.token_field: token}).encode("utf-8")

    with get_session() as session:
        document = DocumentRepository(session).upsert(
            credentials.collection, document_id, owner=env_config.principal, data=body
        )

    logger.info(
        f"Seeded credential record {document.collection}/{document.key}",
        extra={
            "event": "cli.token_seeded",
            "collection": document.collection,
            "document_id": document.key,
            "version": document.version,
        },
    )
    return 0


def set_doc(
    app_config: RelayConfig,
    env_config: EnvironmentConfig,
    collection: str,
    key: str,
    data_path: Path,
    caller: Optional[str] = None,
) -> int:
    """Write one document through the local host; exit status follows the hook result."""
    data = data_path.read_bytes()

    host = LocalDocumentHost(build_dispatcher(app_config, env_config))
    outcome = host.set_doc(caller or env_config.principal, collection, key, data)

    hook = outcome.hook
    logger.info(
        f"Document {collection}/{key} written (version {outcome.document.version}); "
        f"hook status: {hook.status}",
        extra={
            "event": "cli.document_written",
            "collection": collection,
            "document_key": key,
            "status": hook.status,
        },
    )

    if not hook.is_success():
        print(f"Hook failed: {hook.error}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the notification relay.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Notification relay starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "trigger_collection": app_config.deployment.trigger_collection,
            },
        )

        if args.command == "validate":
            print("✓ Configuration is valid")
            return 0

        init_database(env_config.database_url)
        try:
            if args.command == "seed-token":
                return seed_token(app_config, env_config, args.document, args.token)
            return set_doc(
                app_config, env_config, args.collection, args.key, args.data, args.caller
            )
        finally:
            close_database()

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except PersistenceError as e:
        print(f"Store Error: {e}", file=sys.stderr)
        logger.error(
            f"Store error: {e}",
            extra={"event": "store.error", "error_type": type(e).__name__},
        )
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
