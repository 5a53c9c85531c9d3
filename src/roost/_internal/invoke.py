"""Invoke helpers — call sync or async callables uniformly.

Guard functions and confirmation providers can be ``def`` or
``async def``. Any code that awaits a user-provided callable goes
through this helper so the sync/async check lives in exactly one place.

Usage::

    from roost._internal.invoke import invoke

    decision = await invoke(guard, descriptor, result)
"""

import inspect
from typing import Any


async def invoke(fn: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *fn* and await the result if it's awaitable."""
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def accepts_positional(fn: Any) -> bool:
    """Return True if *fn* can take at least one positional argument.

    Used at registration time to decide once how a factory is called.
    """
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without signature metadata: assume they take one
        return True
    return any(
        param.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        )
        for param in sig.parameters.values()
    )


def accepts_keyword(fn: Any, name: str) -> bool:
    """Return True if *fn* can be called with keyword argument *name*."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            return True
        if param.name == name and param.kind is not inspect.Parameter.POSITIONAL_ONLY:
            return True
    return False
