"""Dispatch table behind the store's mutation hook entry points.

The table maps ``(HookEvent, collection)`` to a handler and is filled
explicitly at process start (see ``relay.hooks.factory``). Any event without
a registered handler is acknowledged as an ignored success with no side
effects.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from relay.logging import get_logger
from relay.logging.context import log_context

from .models import AssetContext, DocContext, DocDeleteContext, HookEvent, HookResult

logger = get_logger(__name__, component="hooks")

Handler = Callable[[Any], HookResult]

# Collection wildcard: a handler registered with None matches every collection
ANY_COLLECTION = None


class HookDispatcher:
    """Routes host mutation events to registered handlers."""

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        self._table: Dict[Tuple[HookEvent, Optional[str]], Handler] = {}
        self.logger = logger_instance or logger

    def register(
        self,
        event: HookEvent,
        handler: Handler,
        collections: Optional[Iterable[str]] = None,
    ) -> None:
        """Register a handler for an event, optionally limited to collections.

        Raises:
            ValueError: If a handler is already registered for the same slot
        """
        for collection in collections or [ANY_COLLECTION]:
            slot = (HookEvent(event), collection)
            if slot in self._table:
                raise ValueError(
                    f"Handler already registered for {slot[0].value} on "
                    f"{collection or 'all collections'}"
                )
            self._table[slot] = handler

    def handler_for(self, event: HookEvent, collection: Optional[str]) -> Optional[Handler]:
        """Return the handler for a collection, falling back to the wildcard slot."""
        handler = self._table.get((event, collection))
        if handler is None and collection is not ANY_COLLECTION:
            handler = self._table.get((event, ANY_COLLECTION))
        return handler

    def registered(self) -> List[Tuple[HookEvent, Optional[str]]]:
        return sorted(self._table, key=lambda slot: (slot[0].value, slot[1] or ""))

    def dispatch(
        self,
        event: HookEvent,
        context: Any,
        collection: Optional[str] = None,
        key: Optional[str] = None,
    ) -> HookResult:
        """Invoke the handler registered for (event, collection), if any.

        An unexpected exception from a handler becomes a failed result so the
        host always receives exactly one terminal outcome.
        """
        handler = self.handler_for(event, collection)

        with log_context(hook=event.value, collection=collection, document_key=key):
            if handler is None:
                self.logger.debug(
                    f"No handler for {event.value} on {collection or 'batch'}; ignoring",
                    extra={"event": "hooks.ignored"},
                )
                return HookResult(event=event, status="ignored", collection=collection, key=key)

            try:
                result = handler(context)
            except Exception as e:
                self.logger.error(
                    f"Hook handler for {event.value} raised: {e}",
                    exc_info=True,
                    extra={"event": "hooks.handler_error", "error_type": type(e).__name__},
                )
                return HookResult(
                    event=event,
                    status="failed",
                    collection=collection,
                    key=key,
                    error=f"Unexpected error in {event.value} handler: {e}",
                )

            self.logger.info(
                f"Hook {event.value} finished with status {result.status}",
                extra={"event": "hooks.completed", "status": result.status},
            )
            return result

    # Entry points invoked by the host store

    def on_set_doc(self, context: DocContext) -> HookResult:
        return self.dispatch(HookEvent.SET_DOC, context, context.collection, context.key)

    def on_set_many_docs(self, contexts: List[DocContext]) -> HookResult:
        return self.dispatch(HookEvent.SET_MANY_DOCS, contexts)

    def on_delete_doc(self, context: DocDeleteContext) -> HookResult:
        return self.dispatch(HookEvent.DELETE_DOC, context, context.collection, context.key)

    def on_delete_many_docs(self, contexts: List[DocDeleteContext]) -> HookResult:
        return self.dispatch(HookEvent.DELETE_MANY_DOCS, contexts)

    def on_upload_asset(self, context: AssetContext) -> HookResult:
        return self.dispatch(HookEvent.UPLOAD_ASSET, context, context.collection, context.full_path)

    def on_delete_asset(self, context: Optional[AssetContext]) -> HookResult:
        if context is None:
            return self.dispatch(HookEvent.DELETE_ASSET, context)
        return self.dispatch(HookEvent.DELETE_ASSET, context, context.collection, context.full_path)

    def on_delete_many_assets(self, contexts: List[Optional[AssetContext]]) -> HookResult:
        return self.dispatch(HookEvent.DELETE_MANY_ASSETS, contexts)
