"""Construction of the relay pipeline and its dispatch table at process start."""

from typing import Mapping, Optional

import requests

from relay.config.environment import EnvironmentConfig
from relay.config.models import RelayConfig
from relay.credentials import DocumentLookup, get_credential_resolver
from relay.logging import get_logger
from relay.notifications import DeliveryClient, NotificationRelay

from .dispatcher import HookDispatcher
from .models import DocContext, HookEvent, HookResult

logger = get_logger(__name__, component="hooks")


class EmailRequestHandler:
    """Handles document-set events on the email-request collection.

    Attributes:
        notification_relay: Pipeline run once per event
        owner: Relay principal used to scope credential lookups
    """

    def __init__(self, notification_relay: NotificationRelay, owner: str):
        self.notification_relay = notification_relay
        self.owner = owner

    def __call__(self, context: DocContext) -> HookResult:
        after = context.data.after
        delivery = self.notification_relay.relay(
            context.key,
            after.data if after is not None else None,
            self.owner,
        )
        return HookResult(
            event=HookEvent.SET_DOC,
            status="handled" if delivery.is_success() else "failed",
            collection=context.collection,
            key=context.key,
            error=delivery.error,
            delivery=delivery,
        )


def build_notification_relay(
    app_config: RelayConfig,
    environ: Optional[Mapping[str, str]] = None,
    lookup: Optional[DocumentLookup] = None,
    session: Optional[requests.Session] = None,
) -> NotificationRelay:
    """Build the delivery pipeline for the configured deployment variant."""
    notifications = app_config.notifications

    client = DeliveryClient(
        endpoint_url=notifications.endpoint_url,
        timeout=notifications.timeout_seconds,
        max_response_bytes=notifications.max_response_bytes,
        session=session,
    )
    resolver = get_credential_resolver(
        app_config.deployment.credential_strategy,
        app_config.credentials,
        environ=environ,
        lookup=lookup,
    )

    return NotificationRelay(
        client=client,
        credential_resolver=resolver,
        idempotency_prefix=notifications.idempotency_prefix,
    )


def build_dispatcher(
    app_config: RelayConfig,
    env_config: EnvironmentConfig,
    environ: Optional[Mapping[str, str]] = None,
    lookup: Optional[DocumentLookup] = None,
    session: Optional[requests.Session] = None,
) -> HookDispatcher:
    """Build the dispatch table.

    Only ``on_set_doc`` for the configured trigger collection gets a handler;
    every other event and collection is acknowledged as a no-op.

    Args:
        app_config: Validated relay configuration
        env_config: Environment configuration (supplies the relay principal)
        environ: Environment mapping for the environment credential strategy
        lookup: Document lookup for the store credential strategy
        session: HTTP session for the delivery client

    Returns:
        HookDispatcher ready for the host adapter
    """
    notification_relay = build_notification_relay(
        app_config, environ=environ, lookup=lookup, session=session
    )

    dispatcher = HookDispatcher()
    dispatcher.register(
        HookEvent.SET_DOC,
        EmailRequestHandler(notification_relay, owner=env_config.principal),
        collections=[app_config.deployment.trigger_collection],
    )

    logger.info(
        "Hook dispatch table built",
        extra={
            "event": "hooks.table_built",
            "trigger_collection": app_config.deployment.trigger_collection,
            "credential_strategy": app_config.deployment.credential_strategy,
            "slots": [f"{event.value}:{collection}" for event, collection in dispatcher.registered()],
        },
    )

    return dispatcher
