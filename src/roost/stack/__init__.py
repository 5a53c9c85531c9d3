"""Navigation stack — entries, guarded pops, and change events."""

from roost.stack.entry import StackEntry
from roost.stack.events import NavigationAction, StackChanged, StackEventBus
from roost.stack.guard import BackNavigationGuard, GuardState, VetoDecision
from roost.stack.navigation import NavigationStack, with_name

__all__ = [
    "BackNavigationGuard",
    "GuardState",
    "NavigationAction",
    "NavigationStack",
    "StackChanged",
    "StackEntry",
    "StackEventBus",
    "VetoDecision",
    "with_name",
]
