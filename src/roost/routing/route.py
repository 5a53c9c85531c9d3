"""RouteRequest and PageDescriptor frozen dataclasses.

Route arguments are opaque: any value, with ``None`` meaning *absent*.
An empty string, list or dict is present and empty. Typed access goes
through ``arguments_as()``, which raises instead of casting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from roost.errors import ArgumentTypeError

T = TypeVar("T")


def expect_arguments(arguments: Any, kind: type[T] | tuple[type, ...]) -> T:
    """Return *arguments* if it is an instance of *kind*.

    Raises ``ArgumentTypeError`` on mismatch, including when the
    arguments are absent (``None``) and *kind* does not admit None.
    """
    if isinstance(arguments, kind):
        return arguments  # type: ignore[return-value]
    raise ArgumentTypeError(kind, arguments)


@dataclass(frozen=True, slots=True)
class RouteRequest:
    """A request to navigate to a named route.

    Created by ``Navigator.navigate_by_name()`` and by ``AddressSync``
    when parsing an inbound address.
    """

    name: str
    arguments: Any = None

    @property
    def has_arguments(self) -> bool:
        return self.arguments is not None

    def arguments_as(self, kind: type[T] | tuple[type, ...]) -> T:
        """Return the arguments, checked against *kind*."""
        return expect_arguments(self.arguments, kind)


@dataclass(frozen=True, slots=True)
class PageDescriptor:
    """A resolved page: what a stack entry shows.

    ``name`` is ``None`` for anonymous pages pushed as explicit content,
    bypassing resolution.
    """

    name: str | None
    content: Any
    arguments: Any = None

    @classmethod
    def anonymous(cls, content: Any) -> PageDescriptor:
        return cls(name=None, content=content)

    @classmethod
    def for_request(cls, request: RouteRequest, content: Any) -> PageDescriptor:
        """Wrap *content* produced for *request*, echoing its name and arguments."""
        return cls(name=request.name, content=content, arguments=request.arguments)

    @property
    def is_anonymous(self) -> bool:
        return self.name is None

    def arguments_as(self, kind: type[T] | tuple[type, ...]) -> T:
        """Return the arguments, checked against *kind*."""
        return expect_arguments(self.arguments, kind)


def as_descriptor(page: Any) -> PageDescriptor:
    """Return *page* if it is already a descriptor, else wrap it anonymously."""
    if isinstance(page, PageDescriptor):
        return page
    return PageDescriptor.anonymous(page)
