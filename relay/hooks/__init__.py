"""Mutation hook surface invoked by the host document store.

Build the dispatch table once at startup, then hand it to the host adapter:
    from relay.hooks import build_dispatcher
    dispatcher = build_dispatcher(app_config, env_config)
    result = dispatcher.on_set_doc(context)
"""

from .dispatcher import HookDispatcher
from .factory import EmailRequestHandler, build_dispatcher, build_notification_relay
from .models import (
    AssetContext,
    DocContext,
    DocDeleteContext,
    DocUpsert,
    DocVersion,
    HookEvent,
    HookResult,
)

__all__ = [
    # Dispatcher and construction
    "HookDispatcher",
    "EmailRequestHandler",
    "build_dispatcher",
    "build_notification_relay",
    # Contexts and results
    "HookEvent",
    "HookResult",
    "DocContext",
    "DocDeleteContext",
    "DocUpsert",
    "DocVersion",
    "AssetContext",
]
