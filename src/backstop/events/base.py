"""Observer interface for retry, batch and queue events."""

import typing as t
from abc import ABC, abstractmethod

# Handlers receive the event model and may be sync or async
EventHandler = t.Callable[[t.Any], t.Any]


class BaseEmitter(ABC):
    """Publishes lifecycle events such as ``retry.scheduled`` or ``batch.progress``.

    Executors only ever call ``emit``; subscribers use ``on`` and ``off``.
    """

    @abstractmethod
    def on(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe ``handler`` to ``event_type``."""

    @abstractmethod
    def off(self, event_type: str, handler: EventHandler) -> None:
        """Remove a previously subscribed handler."""

    @abstractmethod
    async def emit(self, event_type: str, event_data: t.Any) -> None:
        """Deliver ``event_data`` to every handler of ``event_type``.

        Implementations must not let a handler failure reach the emitting
        executor.
        """
