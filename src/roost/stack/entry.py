"""Stack entries with process-unique identity keys."""

import itertools
from dataclasses import dataclass, field
from typing import Any

from roost.routing.route import PageDescriptor

# Shared by every stack so keys never repeat within the process
_keys = itertools.count(1)


def next_key() -> int:
    return next(_keys)


@dataclass(frozen=True, slots=True, eq=False)
class StackEntry:
    """One page on the navigation stack.

    Entries compare by identity; two pushes of the same page are distinct.

    ``key`` is assigned at creation and never reused. Render hosts use it
    to track mount/unmount identity across snapshots.
    """

    descriptor: PageDescriptor
    key: int = field(default_factory=next_key)

    @property
    def name(self) -> str | None:
        return self.descriptor.name

    @property
    def content(self) -> Any:
        return self.descriptor.content

    @property
    def arguments(self) -> Any:
        return self.descriptor.arguments

    def __repr__(self) -> str:
        label = self.descriptor.name if self.descriptor.name is not None else "<anonymous>"
        return f"StackEntry({label!s}, key={self.key})"
