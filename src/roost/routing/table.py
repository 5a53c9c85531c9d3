"""Route table — exact route name to page factory.

The first stage of resolution. Lookup is by exact string match; there
is no wildcard or prefix matching here (see ``roost.routing.patterns``).
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from roost._internal.invoke import accepts_positional
from roost.errors import ConfigurationError, DuplicateRouteError


@dataclass(frozen=True, slots=True)
class TableRoute:
    """A frozen route table entry.

    ``takes_arguments`` is decided once at registration from the
    factory's signature: ``lambda: HomePage()`` is called with nothing,
    ``lambda args: DetailPage(args)`` with the request's arguments.
    """

    name: str
    factory: Callable[..., Any]
    takes_arguments: bool = True

    def build(self, arguments: Any) -> Any:
        if self.takes_arguments:
            return self.factory(arguments)
        return self.factory()


class RouteTable:
    """Static mapping from route name to page factory.

    Usage::

        table = RouteTable(reserved=("/",))
        table.register("/settings", SettingsPage)
        route = table.lookup("/settings")
        page = route.build(None)

    Names passed as *reserved* (the home route) count as registered.
    """

    __slots__ = ("_frozen", "_reserved", "_routes")

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._routes: dict[str, TableRoute] = {}
        self._reserved: frozenset[str] = frozenset(reserved)
        self._frozen = False

    def register(self, name: str, factory: Callable[..., Any]) -> TableRoute:
        """Register *factory* under *name*.

        Raises ``DuplicateRouteError`` if *name* is already registered or
        reserved, ``ConfigurationError`` after ``freeze()``.
        """
        if self._frozen:
            msg = f"Cannot register route {name!r} after the route table is frozen."
            raise ConfigurationError(msg)
        if not callable(factory):
            msg = f"Page factory for route {name!r} must be callable, got {type(factory).__name__}."
            raise ConfigurationError(msg)
        if name in self._routes or name in self._reserved:
            raise DuplicateRouteError(name)
        route = TableRoute(name=name, factory=factory, takes_arguments=accepts_positional(factory))
        self._routes[name] = route
        return route

    def lookup(self, name: str) -> TableRoute | None:
        """Return the route registered under *name*, or None."""
        return self._routes.get(name)

    def freeze(self) -> None:
        """Reject further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def names(self) -> frozenset[str]:
        """Registered names, excluding reserved ones."""
        return frozenset(self._routes)

    def is_known(self, name: str) -> bool:
        """True for registered and reserved names."""
        return name in self._routes or name in self._reserved

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __len__(self) -> int:
        return len(self._routes)
