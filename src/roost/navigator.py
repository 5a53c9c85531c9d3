"""The roost navigator — one navigation root.

Mutable during setup (routes, patterns, generators, fallback).
Frozen at the first navigation or an explicit ``freeze()``, which
validates the resolution pipeline and attaches address sync.

There is no global navigator. Whoever needs to navigate receives the
instance explicitly.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from roost._internal.types import FallbackFactory, GuardFunction, PageFactory, RouteGenerator
from roost.address import AddressSync, AddressTransport
from roost.config import NavigatorConfig
from roost.errors import ConfigurationError
from roost.routing.patterns import is_pattern
from roost.routing.resolver import RouteResolver
from roost.routing.route import PageDescriptor, RouteRequest
from roost.routing.table import RouteTable
from roost.stack.entry import StackEntry
from roost.stack.events import StackEventBus
from roost.stack.guard import BackNavigationGuard
from roost.stack.navigation import EntryPredicate, NavigationStack

logger = logging.getLogger("roost.navigator")


class Navigator:
    """A navigation root: route resolution plus the page stack it owns.

    Usage::

        nav = Navigator(HomePage())

        @nav.route("/settings")
        def settings():
            return SettingsPage()

        nav.register_fallback(lambda request: NotFoundPage(request.name))

        nav.navigate_by_name("/settings")
        await nav.go_back()

    The home page sits at the bottom of the stack under
    ``config.home_name`` and can never be popped.
    """

    __slots__ = (
        "_address",
        "_frozen",
        "_guard",
        "_home",
        "_resolver",
        "_stack",
        "_table",
        "_transport",
        "config",
    )

    def __init__(
        self,
        home: Any,
        config: NavigatorConfig | None = None,
        *,
        transport: AddressTransport | None = None,
    ) -> None:
        self.config: NavigatorConfig = config or NavigatorConfig()
        self._table = RouteTable(reserved=(self.config.home_name,))
        self._resolver = RouteResolver(self._table)
        self._guard = BackNavigationGuard()
        self._home = PageDescriptor(self.config.home_name, home)
        self._stack = NavigationStack(
            self._home,
            guard=self._guard,
            events=StackEventBus(queue_size=self.config.event_queue_size),
        )
        self._transport = transport
        self._address: AddressSync | None = None
        self._frozen = False

    # -- Setup --

    def register_route(self, name: str, factory: PageFactory) -> None:
        """Register *factory* for the exact route *name*.

        Raises ``DuplicateRouteError`` for a name already registered,
        including the home name.
        """
        self._check_not_frozen()
        if is_pattern(name):
            msg = (
                f"Route name {name!r} contains {{param}} segments. "
                "Exact routes match literally; use register_pattern() for patterns."
            )
            raise ConfigurationError(msg)
        self._table.register(name, factory)

    def route(self, name: str) -> Callable[[PageFactory], PageFactory]:
        """Register a page factory via decorator."""

        def decorator(factory: PageFactory) -> PageFactory:
            self.register_route(name, factory)
            return factory

        return decorator

    def register_pattern(self, pattern: str, factory: PageFactory) -> None:
        """Register a pattern route such as ``/user/{id:int}``.

        Pattern routes answer in the generator stage, after exact names.
        """
        self._check_not_frozen()
        self._resolver.add_pattern(pattern, factory)

    def register_generator(self, generator: RouteGenerator) -> None:
        """Register a generator. Return None from it for "no match"."""
        self._check_not_frozen()
        self._resolver.add_generator(generator)

    def register_fallback(self, fallback: FallbackFactory) -> None:
        """Register the page used when nothing else matches."""
        self._check_not_frozen()
        self._resolver.set_fallback(fallback)

    def register_guard(self, content: Any, guard: GuardFunction) -> None:
        """Guard back navigation away from *content*.

        Allowed at any time: pages are usually created, and guarded,
        while navigating.
        """
        self._guard.register(content, guard)

    def unregister_guard(self, content: Any) -> None:
        self._guard.unregister(content)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the navigator after it has started navigating. "
                "Register routes, patterns, generators, and the fallback before "
                "the first navigation."
            )
            raise ConfigurationError(msg)

    # -- Freeze --

    def freeze(self) -> None:
        """Validate and compile the navigator. Idempotent.

        Raises ``NoFallbackError`` if no fallback is registered.
        """
        if self._frozen:
            return
        self._resolver.validate()
        if self._transport is not None and self.config.sync_address:
            self._address = AddressSync(
                self._transport,
                table=self._table,
                patterns=self._resolver.patterns,
                home_name=self.config.home_name,
                prefix=self.config.address_prefix,
            )
            self._stack.events.listen(self._address.listener)
        self._frozen = True
        logger.debug(
            "Navigator frozen: %d routes, %d patterns",
            len(self._table),
            len(self._resolver.patterns),
        )

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Read access --

    @property
    def stack(self) -> NavigationStack:
        return self._stack

    @property
    def events(self) -> StackEventBus:
        return self._stack.events

    @property
    def guard(self) -> BackNavigationGuard:
        return self._guard

    @property
    def address_sync(self) -> AddressSync | None:
        return self._address

    @property
    def top(self) -> StackEntry:
        return self._stack.top

    def current_stack(self) -> tuple[StackEntry, ...]:
        """Snapshot of the stack, home first."""
        return self._stack.snapshot()

    def can_go_back(self) -> bool:
        return self._stack.can_pop()

    def resolve(self, name: str, arguments: Any = None) -> PageDescriptor:
        """Resolve without navigating. The home name answers with the home page."""
        self.freeze()
        request = RouteRequest(name, arguments)
        if self._is_home(request):
            return self._home
        return self._resolver.resolve(request)

    def result_of(self, entry: StackEntry) -> asyncio.Future[Any]:
        """Future completed with the result the entry is popped with."""
        return self._stack.result_of(entry)

    # -- Navigation --

    def navigate_by_name(self, name: str, arguments: Any = None) -> StackEntry:
        """Resolve *name* and push the resulting page."""
        descriptor = self.resolve(name, arguments)
        entry = self._stack.push(descriptor)
        self._log("push", entry)
        return entry

    def navigate_to_content(self, content: Any) -> StackEntry:
        """Push *content* as an anonymous page, bypassing resolution."""
        self.freeze()
        entry = self._stack.push(PageDescriptor.anonymous(content))
        self._log("push", entry)
        return entry

    def replace_top_with_content(self, content: Any) -> StackEntry:
        """Replace the top page with anonymous *content*."""
        self.freeze()
        entry = self._stack.replace_top(PageDescriptor.anonymous(content))
        self._log("replace", entry)
        return entry

    def replace_top_with_name(self, name: str, arguments: Any = None) -> StackEntry:
        """Resolve *name* and replace the top page with it."""
        descriptor = self.resolve(name, arguments)
        entry = self._stack.replace_top(descriptor)
        self._log("replace", entry)
        return entry

    def navigate_and_remove_until(
        self,
        name: str,
        predicate: EntryPredicate,
        arguments: Any = None,
    ) -> StackEntry:
        """Resolve *name*, drop entries above the highest *predicate* match, push."""
        descriptor = self.resolve(name, arguments)
        entry = self._stack.push_and_remove_until(descriptor, predicate)
        self._log("push (remove until)", entry)
        return entry

    async def go_back(self, result: Any = None) -> bool:
        """Pop the top page through its guard.

        Returns False if the guard denied. Raises ``EmptyStackError`` at
        the home page and ``GuardBusyError`` while a decision is pending.
        """
        self.freeze()
        leaving = self._stack.top
        popped = await self._stack.pop(result)
        if popped:
            self._log("pop", leaving)
        return popped

    async def maybe_go_back(self, result: Any = None) -> bool:
        """Like ``go_back()``, but returns False at the home page."""
        self.freeze()
        return await self._stack.maybe_pop(result)

    async def pop_until(self, predicate: EntryPredicate) -> int:
        """Pop until *predicate* holds for the top page. Returns pages removed."""
        self.freeze()
        return await self._stack.pop_until(predicate)

    def confirm(self, allowed: bool) -> None:
        """Answer a guard that returned ``VetoDecision.PENDING``."""
        self._guard.resolve(allowed)

    # -- Addresses --

    async def open_address(self, address: str) -> StackEntry:
        """Deep link: parse *address*, resolve it, and push the page.

        The home address pops back to the home page through the guards
        instead of pushing a second home. If a guard stops that, the
        address of the page left on top is written back.

        Raises ``ConfigurationError`` when the navigator has no transport.
        """
        self.freeze()
        sync = self._require_address()
        self._guard.ensure_idle()
        request = sync.parse(address)
        if self._is_home(request):
            sync.on_inbound_address(address)
            await self._stack.pop_until(lambda entry: entry is self._stack.home)
            if self._stack.can_pop():
                sync.on_stack_changed(self._stack.top)
            return self._stack.top
        descriptor = self._resolver.resolve(request)
        sync.on_inbound_address(address)
        entry = self._stack.push(descriptor)
        self._log("deep link", entry)
        return entry

    def open_initial_address(self) -> StackEntry | None:
        """Push the page for the transport's current address at startup.

        Returns None when the address names the home page.
        """
        self.freeze()
        sync = self._require_address()
        request = sync.read_inbound()
        if self._is_home(request):
            return None
        descriptor = self._resolver.resolve(request)
        entry = self._stack.push(descriptor)
        self._log("deep link", entry)
        return entry

    def _is_home(self, request: RouteRequest) -> bool:
        return request.name == self.config.home_name and request.arguments is None

    def _require_address(self) -> AddressSync:
        if self._address is None:
            msg = (
                "Address sync is not enabled. Pass transport= to Navigator and keep "
                "NavigatorConfig.sync_address=True."
            )
            raise ConfigurationError(msg)
        return self._address

    def _log(self, action: str, entry: StackEntry) -> None:
        if self.config.lifecycle_logging:
            logger.info("%s %r (depth %d)", action, entry, len(self._stack))
