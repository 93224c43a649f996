"""In-process event emitter supporting sync and async handlers."""

import inspect
import typing as t
from collections import defaultdict

from ..infrastructure.logging import get_logger
from .base import BaseEmitter, EventHandler

if t.TYPE_CHECKING:
    import loguru


class EventEmitter(BaseEmitter):
    """Dispatches events to subscribed handlers.

    Handlers run in subscription order. A failing handler is logged and
    skipped: observers must never be able to fail the producer.
    """

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self._logger = logger
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def on(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            self._logger.warning(f"Handler {handler} not found for event {event_type}")

    async def emit(self, event_type: str, event_data: t.Any) -> None:
        # Copy so handlers may unsubscribe while we iterate
        for handler in list(self._handlers.get(event_type, ())):
            try:
                result = handler(event_data)
            except Exception:
                self._logger.exception(f"Error in handler for {event_type}")
                continue

            if inspect.isawaitable(result):
                try:
                    await result
                except Exception as exc:
                    self._logger.opt(exception=exc).error(
                        f"Error in async handler for {event_type}"
                    )
