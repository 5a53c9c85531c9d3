"""The navigation stack — ordered page entries with guarded pops.

The stack always holds at least one entry: the home page at the bottom,
which can never be popped. Every mutation is applied completely and then
announced with a single ``StackChanged`` event. An operation that raises
leaves the stack exactly as it was.

Pops are coroutines because the top page's guard may need to wait for
a confirmation. While that decision is pending, every mutation is
rejected with ``GuardBusyError``.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from roost.errors import EmptyStackError
from roost.routing.route import PageDescriptor, as_descriptor
from roost.stack.entry import StackEntry
from roost.stack.events import NavigationAction, StackChanged, StackEventBus
from roost.stack.guard import BackNavigationGuard

logger = logging.getLogger("roost.stack")

EntryPredicate = Callable[[StackEntry], bool]


def with_name(name: str) -> EntryPredicate:
    """Predicate matching entries whose route name is *name*.

    Usage::

        await stack.pop_until(with_name("/"))
    """

    def predicate(entry: StackEntry) -> bool:
        return entry.name == name

    return predicate


class NavigationStack:
    """Owns the ordered sequence of active pages.

    Only the stack mutates its entries. Callers see immutable snapshots.

    Usage::

        stack = NavigationStack(PageDescriptor("/", home))
        stack.push(PageDescriptor("/settings", settings))
        await stack.pop()
    """

    __slots__ = ("_entries", "_events", "_guard", "_results")

    def __init__(
        self,
        home: PageDescriptor | Any,
        *,
        guard: BackNavigationGuard | None = None,
        events: StackEventBus | None = None,
    ) -> None:
        self._entries: list[StackEntry] = [StackEntry(as_descriptor(home))]
        self._guard = guard if guard is not None else BackNavigationGuard()
        self._events = events if events is not None else StackEventBus()
        # entry key -> future completed with the pop result
        self._results: dict[int, asyncio.Future[Any]] = {}

    # -- Read access --

    @property
    def guard(self) -> BackNavigationGuard:
        return self._guard

    @property
    def events(self) -> StackEventBus:
        return self._events

    @property
    def top(self) -> StackEntry:
        return self._entries[-1]

    @property
    def home(self) -> StackEntry:
        return self._entries[0]

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> tuple[StackEntry, ...]:
        """Point-in-time view, bottom first."""
        return tuple(self._entries)

    def can_pop(self) -> bool:
        return len(self._entries) > 1

    def result_of(self, entry: StackEntry) -> asyncio.Future[Any]:
        """Future completed with the result passed to the pop removing *entry*.

        Completes with ``None`` if the entry is replaced or removed
        without a pop. Must be called from a running event loop while
        *entry* is on the stack.
        """
        if all(e.key != entry.key for e in self._entries):
            msg = f"{entry!r} is not on the stack."
            raise ValueError(msg)
        future = self._results.get(entry.key)
        if future is None:
            future = asyncio.get_running_loop().create_future()
            self._results[entry.key] = future
        return future

    # -- Mutations --

    def push(self, page: PageDescriptor | Any) -> StackEntry:
        """Append *page* as the new top. Bare content is pushed anonymously."""
        self._guard.ensure_idle()
        entry = StackEntry(as_descriptor(page))
        self._entries.append(entry)
        logger.debug("push %r (depth %d)", entry, len(self._entries))
        self._emit(NavigationAction.PUSH, added=entry)
        return entry

    def replace_top(self, page: PageDescriptor | Any) -> StackEntry:
        """Swap the top entry for *page*. Length is unchanged.

        A later pop returns to the entry below the replaced one.
        Replacing the home entry makes *page* the new home.
        """
        self._guard.ensure_idle()
        entry = StackEntry(as_descriptor(page))
        old = self._entries[-1]
        self._entries[-1] = entry
        logger.debug("replace %r with %r", old, entry)
        self._complete(old, None)
        self._emit(NavigationAction.REPLACE, added=entry, removed=(old,))
        return entry

    async def pop(self, result: Any = None) -> bool:
        """Remove the top entry if its guard allows.

        Returns True when the entry was removed, False when the guard
        denied. Raises ``EmptyStackError`` when only the home entry is
        left and ``GuardBusyError`` while another decision is pending.
        """
        self._guard.ensure_idle()
        if len(self._entries) == 1:
            raise EmptyStackError
        entry = self._entries[-1]
        try:
            if not await self._guard.check(entry, result):
                logger.debug("pop of %r denied", entry)
                return False
            # The top cannot have changed: mutations are rejected while the guard is busy
            self._entries.pop()
        finally:
            self._guard.settle()
        logger.debug("pop %r (depth %d)", entry, len(self._entries))
        self._complete(entry, result)
        self._emit(NavigationAction.POP, removed=(entry,))
        return True

    async def maybe_pop(self, result: Any = None) -> bool:
        """Like ``pop()``, but returns False at the home entry instead of raising."""
        if not self.can_pop():
            return False
        return await self.pop(result)

    async def pop_until(self, predicate: EntryPredicate) -> int:
        """Pop while *predicate* is false for the top entry.

        Each pop passes through the guard. Stops without error at the
        home entry or when a guard denies. Returns the number of
        entries removed.
        """
        popped = 0
        while not predicate(self.top) and self.can_pop():
            if not await self.pop():
                break
            popped += 1
        return popped

    def push_and_remove_until(
        self,
        page: PageDescriptor | Any,
        predicate: EntryPredicate,
    ) -> StackEntry:
        """Push *page* after removing every entry above the highest match.

        Entries are removed without consulting guards. The home entry is
        always kept, so a predicate matching nothing leaves
        ``[home, page]``. Applied and announced as one mutation.
        """
        self._guard.ensure_idle()
        keep = 1
        for index in range(len(self._entries) - 1, 0, -1):
            if predicate(self._entries[index]):
                keep = index + 1
                break
        entry = StackEntry(as_descriptor(page))
        removed = tuple(self._entries[keep:])
        self._entries[keep:] = [entry]
        logger.debug("push %r removing %d entries", entry, len(removed))
        for old in removed:
            self._complete(old, None)
        self._emit(NavigationAction.REMOVE, added=entry, removed=removed)
        return entry

    # -- Internals --

    def _complete(self, entry: StackEntry, result: Any) -> None:
        future = self._results.pop(entry.key, None)
        if future is not None and not future.done():
            future.set_result(result)
        # A guard lives as long as some entry still shows its content
        if all(e.content is not entry.content for e in self._entries):
            self._guard.release(entry.content)

    def _emit(
        self,
        action: NavigationAction,
        *,
        added: StackEntry | None = None,
        removed: tuple[StackEntry, ...] = (),
    ) -> None:
        self._events.emit(
            StackChanged(action=action, entries=self.snapshot(), added=added, removed=removed)
        )
