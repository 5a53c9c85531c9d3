"""Stack change events — synchronous listeners and async subscriptions.

Every applied mutation emits one ``StackChanged`` event after the stack
has been updated. Vetoed or failed operations emit nothing.

- ``listen(fn)`` registers a synchronous callback, invoked in
  registration order inside the mutating call. Address sync uses this.
- ``subscribe()`` returns an async iterator backed by its own bounded
  ``asyncio.Queue``. Render hosts running their own task use this.

StackChanged is a frozen dataclass holding an immutable snapshot, so
it is safe to hand to any number of consumers.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from enum import Enum

from roost.stack.entry import StackEntry

logger = logging.getLogger("roost.stack")

Listener = Callable[["StackChanged"], object]


class NavigationAction(Enum):
    PUSH = "push"
    REPLACE = "replace"
    POP = "pop"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class StackChanged:
    """A single applied stack mutation."""

    action: NavigationAction
    entries: tuple[StackEntry, ...]
    added: StackEntry | None = None
    removed: tuple[StackEntry, ...] = ()

    @property
    def top(self) -> StackEntry:
        return self.entries[-1]


class StackEventBus:
    """Broadcast channel for ``StackChanged`` events.

    Usage in a render host::

        async for event in navigator.events.subscribe():
            host.render(event.entries)
    """

    __slots__ = ("_listeners", "_queue_size", "_subscribers")

    def __init__(self, queue_size: int = 256) -> None:
        self._listeners: list[Listener] = []
        self._subscribers: set[asyncio.Queue[StackChanged | None]] = set()
        self._queue_size = queue_size

    def listen(self, listener: Listener) -> Callable[[], None]:
        """Register a synchronous listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: StackChanged) -> None:
        """Deliver *event* to every listener and subscriber.

        A failing listener is logged and does not stop delivery to the
        others; the mutation it reports has already been applied.
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Stack listener %r failed on %s", listener, event.action.value)
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Dropping %s event for slow subscriber", event.action.value)

    async def subscribe(self) -> AsyncIterator[StackChanged]:
        """Subscribe to stack events.

        Yields events as they are emitted. The subscription is cleaned up
        when the iterator exits.
        """
        queue: asyncio.Queue[StackChanged | None] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.add(queue)
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
        finally:
            self._subscribers.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def close(self) -> None:
        """Signal all subscribers to stop."""
        for queue in self._subscribers:
            try:
                queue.put_nowait(None)
            except asyncio.QueueFull:
                logger.warning("Subscriber queue full on close; it will stop after draining")
        self._subscribers.clear()
