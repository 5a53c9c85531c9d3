"""Test utilities for roost navigators.

A recording render host and stack assertions. Each assertion produces a
clear error message on failure::

    from roost.testing import RecordingHost, assert_stack_names

    host = RecordingHost.attach(nav)
    nav.navigate_by_name("/second")
    assert_stack_names(nav, ["/", "/second"])
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from roost.stack.entry import StackEntry
from roost.stack.events import NavigationAction, StackChanged

if TYPE_CHECKING:
    from roost.navigator import Navigator


def stack_names(entries: Sequence[StackEntry]) -> list[str | None]:
    """Route names of *entries*, ``None`` for anonymous pages."""
    return [entry.name for entry in entries]


def assert_stack_names(navigator: Navigator, expected: Sequence[str | None]) -> None:
    """Assert the navigator's stack holds pages named *expected*, home first."""
    actual = stack_names(navigator.current_stack())
    assert actual == list(expected), f"Expected stack {list(expected)!r}, got {actual!r}"


def assert_top_content(navigator: Navigator, content: object) -> None:
    """Assert the top page shows exactly *content* (identity)."""
    top = navigator.current_stack()[-1]
    assert top.content is content, f"Top page shows {top.content!r}, expected {content!r}"


class RecordingHost:
    """A render host that records every stack change it is shown.

    ``mounted`` tracks the keys a real host would currently have
    mounted, updated the way a host diffs snapshots.
    """

    __slots__ = ("_unsubscribe", "events", "mounted")

    def __init__(self) -> None:
        self.events: list[StackChanged] = []
        self.mounted: list[int] = []
        self._unsubscribe: Callable[[], None] | None = None

    @classmethod
    def attach(cls, navigator: Navigator) -> RecordingHost:
        host = cls()
        host.mounted = [entry.key for entry in navigator.current_stack()]
        host._unsubscribe = navigator.events.listen(host.render)
        return host

    def render(self, event: StackChanged) -> None:
        self.events.append(event)
        self.mounted = [entry.key for entry in event.entries]

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def actions(self) -> list[NavigationAction]:
        return [event.action for event in self.events]

    @property
    def snapshots(self) -> list[tuple[StackEntry, ...]]:
        return [event.entries for event in self.events]
