"""Address sync — mirror the active route into an external address.

Outbound, the name of the top entry (and simple arguments) is written
through a host-provided transport: a browser URL, a deep-link channel.
Anonymous pages leave the previous address in place.

Inbound, an address is parsed back into a ``RouteRequest``:

- ``/settings``           -> RouteRequest("/settings")  (table or pattern name)
- ``/parameterpage/Hello`` -> RouteRequest("/parameterpage", "Hello")
- ``/search?q=owl``        -> RouteRequest("/search", {"q": "owl"})

Parsing and formatting are inverse for every address this module
writes, and an inbound address is remembered as current, so the stack
change it causes is never written back (no address/stack loop).
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Protocol
from urllib.parse import parse_qsl, quote, unquote, urlencode

from roost.routing.patterns import PatternRouter
from roost.routing.route import PageDescriptor, RouteRequest
from roost.routing.table import RouteTable
from roost.stack.entry import StackEntry
from roost.stack.events import StackChanged

logger = logging.getLogger("roost.address")

_SLASHES = re.compile(r"/{2,}")


class AddressTransport(Protocol):
    """Host-provided read/write access to the external address."""

    def read(self) -> str: ...

    def write(self, address: str) -> None: ...


class MemoryTransport:
    """In-memory transport. Records every write in ``writes``."""

    __slots__ = ("address", "writes")

    def __init__(self, address: str = "/") -> None:
        self.address = address
        self.writes: list[str] = []

    def read(self) -> str:
        return self.address

    def write(self, address: str) -> None:
        self.address = address
        self.writes.append(address)


class AddressSync:
    """Keep an external address and the navigation stack in step.

    Usage::

        sync = AddressSync(transport, table=table)
        navigator.events.listen(sync.listener)
        request = sync.on_inbound_address("/parameterpage/Hello")
    """

    __slots__ = ("_current", "_home_name", "_patterns", "_prefix", "_table", "_transport")

    def __init__(
        self,
        transport: AddressTransport,
        *,
        table: RouteTable,
        patterns: PatternRouter | None = None,
        home_name: str = "/",
        prefix: str = "",
    ) -> None:
        self._transport = transport
        self._table = table
        self._patterns = patterns
        self._home_name = home_name
        self._prefix = prefix
        self._current: str | None = None

    @property
    def transport(self) -> AddressTransport:
        return self._transport

    @property
    def current(self) -> str | None:
        """The last address written or received, or None."""
        return self._current

    # -- Formatting --

    def format_request(self, name: str, arguments: Any = None) -> str:
        """Build the address for *name* and *arguments*.

        Non-empty string arguments become one quoted trailing segment,
        non-empty mappings a query string. Other arguments are not
        reflected in the address.
        """
        if isinstance(arguments, str) and arguments:
            path = f"{name.rstrip('/')}/{quote(arguments, safe='')}"
        elif isinstance(arguments, Mapping) and arguments:
            path = f"{name}?{urlencode({str(k): str(v) for k, v in arguments.items()})}"
        else:
            path = name
        return f"{self._prefix}{path}"

    def format_address(self, descriptor: PageDescriptor) -> str | None:
        """The address for *descriptor*, or None for anonymous pages."""
        if descriptor.name is None:
            return None
        return self.format_request(descriptor.name, descriptor.arguments)

    # -- Parsing --

    def parse(self, address: str) -> RouteRequest:
        """Parse *address* into a request without touching sync state."""
        raw = address
        if self._prefix and raw.startswith(self._prefix):
            raw = raw[len(self._prefix) :]
        raw = raw.partition("#")[0]
        path, _, query_string = raw.partition("?")
        # Paths never carry a host: "//x" is the route "/x"
        path = _SLASHES.sub("/", path) or self._home_name
        query = dict(parse_qsl(query_string, keep_blank_values=True)) if query_string else None

        if self._is_route_name(path) or query is not None:
            return RouteRequest(path, query)

        head, sep, tail = path.rstrip("/").rpartition("/")
        if sep and head and tail:
            return RouteRequest(head, unquote(tail))
        return RouteRequest(path)

    def _is_route_name(self, path: str) -> bool:
        if self._table.is_known(path):
            return True
        return self._patterns is not None and self._patterns.match(path) is not None

    # -- Sync --

    def on_stack_changed(self, top: StackEntry) -> str | None:
        """Write the address for *top*. Returns the address written, or None.

        Nothing is written for anonymous entries or when the address is
        already current.
        """
        address = self.format_address(top.descriptor)
        if address is None or address == self._current:
            return None
        self._current = address
        self._transport.write(address)
        logger.debug("address -> %s", address)
        return address

    def on_inbound_address(self, address: str) -> RouteRequest:
        """Parse an inbound address and remember it as current.

        Feeding the same address twice yields equal requests.
        """
        request = self.parse(address)
        self._current = self.format_request(request.name, request.arguments)
        logger.debug("address <- %s (%r)", address, request)
        return request

    def read_inbound(self) -> RouteRequest:
        """Parse whatever address the transport currently shows."""
        return self.on_inbound_address(self._transport.read())

    def listener(self, event: StackChanged) -> None:
        """``StackEventBus.listen`` adapter."""
        self.on_stack_changed(event.top)
