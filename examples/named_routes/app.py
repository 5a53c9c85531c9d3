"""Named routes — table routes, a parameter page, and a not-found fallback.

A two-screen app with a page that takes a string parameter from the
address bar. Nothing is registered for ``/parameterpage``: a generator
answers ``/parameterpage`` requests carrying a message, and anything
else lands on the not-found page.

Demonstrates:
- ``register_route`` for exact names
- ``register_generator`` for requests the table does not know
- ``register_fallback`` echoing the unresolved request
- Address sync and deep links through ``MemoryTransport``

Run:
    python app.py
"""

import asyncio
from dataclasses import dataclass

from roost import MemoryTransport, Navigator, NavigatorConfig, RouteRequest


@dataclass(frozen=True)
class Screen:
    title: str
    body: str = ""


@dataclass(frozen=True)
class NotFound:
    name: str
    arguments: object = None


def parameter_page(request: RouteRequest) -> Screen | None:
    if request.name != "/parameterpage" or not isinstance(request.arguments, str):
        return None
    return Screen("Parameter", request.arguments_as(str))


def build_navigator(address: str = "/") -> Navigator:
    nav = Navigator(
        Screen("Home"),
        NavigatorConfig(lifecycle_logging=True),
        transport=MemoryTransport(address),
    )
    nav.register_route("/first", lambda: Screen("First"))
    nav.register_route("/second", lambda: Screen("Second"))
    nav.register_generator(parameter_page)
    nav.register_fallback(lambda request: NotFound(request.name, request.arguments))
    return nav


async def main() -> None:
    nav = build_navigator()
    nav.navigate_by_name("/second")
    nav.navigate_by_name("/parameterpage", "Hello")
    print(nav.address_sync.transport.read())  # type: ignore[union-attr]
    await nav.go_back()
    for entry in nav.current_stack():
        print(entry.name, entry.content)


if __name__ == "__main__":
    import logging

    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
