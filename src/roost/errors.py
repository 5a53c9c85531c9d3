"""Roost exception hierarchy.

Shared across the route table, resolver, stack, guard, and navigator so
every module raises and catches the same types.

Configuration errors abort setup. Navigation errors are reported to the
caller of the failing operation and always leave the stack unchanged.
"""

from typing import Any


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when navigator configuration is invalid.

    Typically raised during ``Navigator.freeze()`` at startup.
    """


class DuplicateRouteError(ConfigurationError):
    """A route name was registered twice.

    The implicit home name counts as registered, so registering it
    explicitly also fails.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Route {name!r} is already registered. "
            "Each route name maps to exactly one page factory."
        )


class NoFallbackError(ConfigurationError):
    """No fallback page is available to absorb unresolved routes."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            detail
            or "No fallback registered. Call register_fallback() before the first navigation."
        )


class NavigationError(RoostError):
    """A runtime navigation request was rejected. The stack is unchanged."""


class EmptyStackError(NavigationError):
    """Attempted to pop the home entry."""

    def __init__(self, detail: str = "Cannot pop the home entry.") -> None:
        super().__init__(detail)


class GuardBusyError(NavigationError):
    """A back-navigation decision is still pending."""

    def __init__(
        self,
        detail: str = "A back-navigation decision is pending; the request was rejected.",
    ) -> None:
        super().__init__(detail)


class NoPendingDecisionError(NavigationError):
    """A confirmation arrived while no back-navigation decision was pending."""

    def __init__(
        self,
        detail: str = "No back-navigation decision is awaiting confirmation.",
    ) -> None:
        super().__init__(detail)


class ArgumentTypeError(RoostError, TypeError):
    """Route arguments were accessed as the wrong type."""

    def __init__(self, expected: type | tuple[type, ...], actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        if isinstance(expected, tuple):
            wanted = " | ".join(t.__name__ for t in expected)
        else:
            wanted = expected.__name__
        super().__init__(
            f"Route arguments are {type(actual).__name__}, expected {wanted}: {actual!r}"
        )
