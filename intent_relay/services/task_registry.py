"""Task registry mapping handler kinds to the handlers that execute them."""

from __future__ import annotations

from typing import Mapping, MutableMapping

from intent_relay.core.exceptions import FatalConfigurationError
from intent_relay.core.intents import HandlerKind
from intent_relay.core.logging import get_logger
from intent_relay.core.ports import Handler

logger = get_logger(__name__)


class TaskRegistry:
    """Resolve sub-request kinds to registered handlers."""

    def __init__(self, handlers: Mapping[HandlerKind, Handler] | None = None) -> None:
        self._handlers: MutableMapping[HandlerKind, Handler] = dict(handlers or {})

    def register(self, kind: HandlerKind, handler: Handler) -> None:
        """Register or replace the handler for ``kind``."""

        self._handlers[kind] = handler

    def unregister(self, kind: HandlerKind) -> None:
        """Remove a handler if present."""

        self._handlers.pop(kind, None)

    def resolve(self, kind: HandlerKind) -> Handler:
        """Return the handler for ``kind``.

        The kind set is closed, so a missing handler is a wiring bug and is
        never retried.
        """

        try:
            return self._handlers[kind]
        except KeyError as exc:
            logger.error("[task-registry] No handler registered for kind=%s", kind)
            raise FatalConfigurationError(f"No handler registered for kind {kind}") from exc

    def kinds(self) -> frozenset[HandlerKind]:
        """Return the registered handler kinds."""

        return frozenset(self._handlers)

    def handlers(self) -> Mapping[HandlerKind, Handler]:
        """Return a shallow copy of the current handler registry."""

        return dict(self._handlers)


__all__ = ["TaskRegistry"]
