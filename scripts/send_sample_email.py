#!/usr/bin/env python3
"""Sample delivery harness for end-to-end validation.

Writes one email request document through the local host and prints what
the relay did with it. It can operate in two modes:

1. Stub mode (default): the notification API is replaced by a stub that
   answers 200, so no network request is made
2. Real endpoint mode: posts to the configured endpoint (requires a token)

Usage:
    # Run against the stub API
    python scripts/send_sample_email.py

    # Send for real
    RELAY_REAL_SEND=1 NOTIFICATIONS_TOKEN=... python scripts/send_sample_email.py --to you@example.com
"""

import argparse
import json
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import requests
from dotenv import load_dotenv

from relay.config.loader import load_config
from relay.hooks import build_dispatcher
from relay.host import LocalDocumentHost
from relay.logging.config import configure_logging
from relay.persistence.database import close_database, init_database


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def stub_session() -> requests.Session:
    """A session whose POST answers 200 with a short JSON body."""
    response = MagicMock()
    response.status_code = 200
    response.iter_content.return_value = iter([b'{"status":"queued"}'])

    session = MagicMock(spec=requests.Session)
    session.post.return_value = response
    return session


def main():
    """Main entry point for the sample delivery harness."""
    parser = argparse.ArgumentParser(
        description="Write a sample email request and relay it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to configuration file")
    parser.add_argument(
        "--database",
        type=Path,
        default=Path("data/sample_relay.db"),
        help="Path to SQLite database (default: data/sample_relay.db)",
    )
    parser.add_argument("--key", default="sample-request", help="Document key (default: sample-request)")
    parser.add_argument("--to", default="recipient@example.com", help="Recipient address")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()

    load_dotenv()

    real_send = os.environ.get("RELAY_REAL_SEND", "0") == "1"

    print_header("Notification Relay - Sample Delivery Harness")
    print(f"Database: {args.database}")
    print(f"Document key: {args.key}")

    if real_send:
        print("\n⚠️  REAL ENDPOINT MODE ENABLED")
        print("   An actual email will be sent to " + args.to)
        response = input("\nContinue? [y/N]: ")
        if response.lower() != "y":
            print("Aborted.")
            return 1
    else:
        print("\nUsing a stub notification API (no network requests will be made)")

    app_config, env_config = load_config(args.config)
    configure_logging(
        level=args.log_level,
        format_type=app_config.logging.format,
        environment="validation",
    )

    database_url = f"sqlite:///{args.database.absolute()}"
    init_database(database_url)

    try:
        dispatcher = build_dispatcher(
            app_config,
            env_config,
            session=None if real_send else stub_session(),
        )
        host = LocalDocumentHost(dispatcher)

        body = json.dumps(
            {
                "from": "noreply@futura.app",
                "to": args.to,
                "subject": "Files shared with you",
                "text": "",
                "user_name": "Sample Sender",
                "recipient_name": "Sample Recipient",
            }
        ).encode("utf-8")

        outcome = host.set_doc(
            env_config.principal,
            app_config.deployment.trigger_collection,
            args.key,
            body,
        )
    finally:
        close_database()

    print_header("Result")
    hook = outcome.hook
    print(f"Document version: {outcome.document.version}")
    print(f"Hook status: {hook.status}")
    if hook.delivery is not None:
        print(f"Idempotency key: {hook.delivery.idempotency_key}")
        print(f"Status code: {hook.delivery.status_code}")
    if hook.error:
        print(f"Error: {hook.error}")

    return 0 if hook.is_success() else 1


if __name__ == "__main__":
    sys.exit(main())
