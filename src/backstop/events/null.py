"""Emitter used when nobody observes an executor."""

import typing as t

from .base import BaseEmitter, EventHandler


class NullEmitter(BaseEmitter):
    """Accepts subscriptions and drops every event.

    ``RequestQueue`` uses it by default so queues cost nothing to observe
    unless an emitter is passed in.
    """

    def on(self, event_type: str, handler: EventHandler) -> None:
        pass

    def off(self, event_type: str, handler: EventHandler) -> None:
        pass

    async def emit(self, event_type: str, event_data: t.Any) -> None:
        pass
