"""Back-navigation guard — lets the top page veto or delay its removal.

Each pop attempt runs a small state machine::

    IDLE -> INTERCEPTED -> ALLOWED | DENIED -> IDLE

A guard function is registered for a page's content and called with
``(descriptor, result)``. It may answer:

- ``VetoDecision.ALLOW`` / ``True`` — pop proceeds
- ``VetoDecision.DENY`` / ``False`` — pop is cancelled
- ``VetoDecision.PENDING`` — decision arrives later via ``resolve()``
- an awaitable of any of the above — e.g. a confirmation dialog

While a decision is pending the guard is *busy*: another check raises
``GuardBusyError`` instead of queueing.
"""

import asyncio
import logging
from enum import Enum
from typing import Any

from roost._internal.invoke import invoke
from roost._internal.types import GuardFunction
from roost.errors import ConfigurationError, GuardBusyError, NoPendingDecisionError
from roost.stack.entry import StackEntry

logger = logging.getLogger("roost.guard")


class VetoDecision(Enum):
    ALLOW = "allow"
    DENY = "deny"
    PENDING = "pending"


class GuardState(Enum):
    IDLE = "idle"
    INTERCEPTED = "intercepted"
    ALLOWED = "allowed"
    DENIED = "denied"


def _as_allowed(decision: Any) -> bool | None:
    """Map a guard answer to True/False, or None for PENDING."""
    if decision is VetoDecision.PENDING:
        return None
    if isinstance(decision, VetoDecision):
        return decision is VetoDecision.ALLOW
    if isinstance(decision, bool):
        return decision
    msg = (
        f"Guard returned {decision!r}. "
        "Guards must return a VetoDecision, a bool, or an awaitable of either."
    )
    raise ConfigurationError(msg)


class BackNavigationGuard:
    """Per-content pop interception.

    Usage::

        guard = BackNavigationGuard()
        guard.register(editor, lambda page, result: not editor.dirty)

        allowed = await guard.check(stack.top, result=None)
    """

    __slots__ = ("_guards", "_last_decision", "_pending", "_state")

    def __init__(self) -> None:
        # id(content) -> (content, fn); holding content keeps the id stable
        self._guards: dict[int, tuple[Any, GuardFunction]] = {}
        self._state = GuardState.IDLE
        self._pending: asyncio.Future[bool] | None = None
        self._last_decision: VetoDecision | None = None

    # -- Registration --

    def register(self, content: Any, fn: GuardFunction) -> None:
        """Guard pops of any entry showing *content*. Replaces an existing guard."""
        if not callable(fn):
            msg = f"Guard must be callable, got {type(fn).__name__}."
            raise ConfigurationError(msg)
        self._guards[id(content)] = (content, fn)

    def unregister(self, content: Any) -> None:
        self._guards.pop(id(content), None)

    def release(self, content: Any) -> None:
        """Drop *content*'s guard once no stack entry shows it any more."""
        registered = self._guards.get(id(content))
        if registered is not None and registered[0] is content:
            del self._guards[id(content)]
            logger.debug("Released guard for %s", type(content).__name__)

    def guard_for(self, entry: StackEntry) -> GuardFunction | None:
        registered = self._guards.get(id(entry.content))
        if registered is None or registered[0] is not entry.content:
            return None
        return registered[1]

    def __len__(self) -> int:
        return len(self._guards)

    # -- State --

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is GuardState.INTERCEPTED

    @property
    def awaiting_confirmation(self) -> bool:
        """True while a ``PENDING`` answer waits for ``resolve()``."""
        return self._pending is not None and not self._pending.done()

    @property
    def last_decision(self) -> VetoDecision | None:
        return self._last_decision

    def ensure_idle(self) -> None:
        """Raise ``GuardBusyError`` while a decision is pending."""
        if self.busy:
            raise GuardBusyError

    # -- Decision --

    async def check(self, entry: StackEntry, result: Any = None) -> bool:
        """Ask *entry*'s guard whether it may be popped.

        Returns True when allowed (or unguarded), False when denied.
        Raises ``GuardBusyError`` if another decision is pending.
        """
        self.ensure_idle()
        fn = self.guard_for(entry)
        if fn is None:
            return True

        self._state = GuardState.INTERCEPTED
        logger.debug("Intercepted pop of %r", entry)
        try:
            answer = await invoke(fn, entry.descriptor, result)
            allowed = _as_allowed(answer)
            if allowed is None:
                loop = asyncio.get_running_loop()
                self._pending = loop.create_future()
                logger.debug("Pop of %r awaiting confirmation", entry)
                allowed = await self._pending
        except BaseException:
            self._state = GuardState.IDLE
            self._pending = None
            raise

        self._pending = None
        self._last_decision = VetoDecision.ALLOW if allowed else VetoDecision.DENY
        self._state = GuardState.ALLOWED if allowed else GuardState.DENIED
        logger.debug("Pop of %r %s", entry, self._state.value)
        return allowed

    def resolve(self, allowed: bool) -> None:
        """Deliver the out-of-band answer for a ``PENDING`` decision.

        Raises ``NoPendingDecisionError`` when no decision is awaiting
        confirmation.
        """
        if self._pending is None or self._pending.done():
            raise NoPendingDecisionError
        self._pending.set_result(bool(allowed))

    def settle(self) -> None:
        """Return to IDLE once the stack has applied (or skipped) the pop."""
        self._state = GuardState.IDLE
