#!/usr/bin/env python3
"""Simple script to verify config.example.yaml structure without the relay package."""

import yaml
from pathlib import Path


def verify_config_structure():
    """Verify config.example.yaml has the expected structure."""
    config_file = Path("config.example.yaml")

    if not config_file.exists():
        print("✗ config.example.yaml not found")
        return False

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        print(f"✗ Failed to parse config.example.yaml: {e}")
        return False

    errors = []

    known_sections = ['deployment', 'notifications', 'credentials', 'logging']
    for key in config:
        if key not in known_sections:
            errors.append(f"Unknown top-level key: {key}")

    for key in known_sections:
        if key in config and not isinstance(config[key], dict):
            errors.append(f"'{key}' must be a dictionary")

    deployment = config.get('deployment') or {}
    if isinstance(deployment, dict):
        strategy = deployment.get('credential_strategy', 'environment')
        if strategy not in ('environment', 'store'):
            errors.append(f"deployment.credential_strategy has invalid value: {strategy}")

    notifications = config.get('notifications') or {}
    if isinstance(notifications, dict):
        url = notifications.get('endpoint_url', 'https://')
        if not str(url).startswith(('http://', 'https://')):
            errors.append(f"notifications.endpoint_url must be an http(s) URL: {url}")

    logging_section = config.get('logging') or {}
    if isinstance(logging_section, dict):
        fmt = logging_section.get('format', 'key-value')
        if fmt not in ('json', 'key-value'):
            errors.append(f"logging.format has invalid value: {fmt}")

    if errors:
        print("✗ config.example.yaml validation failed:")
        for error in errors:
            print(f"  - {error}")
        return False

    print("✓ config.example.yaml structure is valid")
    print(f"  - Trigger collection: {deployment.get('trigger_collection', 'email_requests')}")
    print(f"  - Credential strategy: {deployment.get('credential_strategy', 'environment')}")
    print(f"  - Endpoint: {notifications.get('endpoint_url', 'default')}")
    return True


if __name__ == "__main__":
    import sys
    success = verify_config_structure()
    sys.exit(0 if success else 1)
