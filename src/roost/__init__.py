"""Roost — a navigation stack and route resolution engine.

Decides *which pages are on the stack* and *how a named request becomes
a page*. Rendering is left to the host.

Basic usage::

    from roost import Navigator

    nav = Navigator(HomePage())
    nav.register_route("/settings", SettingsPage)
    nav.register_fallback(lambda request: NotFoundPage(request.name))

    nav.navigate_by_name("/settings")
    await nav.go_back()

Deep links (pass any object with ``read()`` / ``write(address)``)::

    nav = Navigator(HomePage(), transport=MemoryTransport("/user/42"))
    nav.register_pattern("/user/{id:int}", UserPage)
    ...
    nav.open_initial_address()
"""

__version__ = "0.1.0"
__all__ = [
    "AddressSync",
    "ArgumentTypeError",
    "BackNavigationGuard",
    "ConfigurationError",
    "DuplicateRouteError",
    "EmptyStackError",
    "GuardBusyError",
    "GuardState",
    "MemoryTransport",
    "NavigationAction",
    "NavigationError",
    "NavigationStack",
    "Navigator",
    "NavigatorConfig",
    "NoFallbackError",
    "NoPendingDecisionError",
    "PageDescriptor",
    "RoostError",
    "RouteRequest",
    "RouteResolver",
    "RouteTable",
    "StackChanged",
    "StackEntry",
    "VetoDecision",
    "with_name",
]

# name -> module path
_LAZY_IMPORTS: dict[str, str] = {
    "AddressSync": "roost.address",
    "MemoryTransport": "roost.address",
    "NavigatorConfig": "roost.config",
    "ArgumentTypeError": "roost.errors",
    "ConfigurationError": "roost.errors",
    "DuplicateRouteError": "roost.errors",
    "EmptyStackError": "roost.errors",
    "GuardBusyError": "roost.errors",
    "NavigationError": "roost.errors",
    "NoFallbackError": "roost.errors",
    "NoPendingDecisionError": "roost.errors",
    "RoostError": "roost.errors",
    "Navigator": "roost.navigator",
    "RouteResolver": "roost.routing.resolver",
    "PageDescriptor": "roost.routing.route",
    "RouteRequest": "roost.routing.route",
    "RouteTable": "roost.routing.table",
    "StackEntry": "roost.stack.entry",
    "NavigationAction": "roost.stack.events",
    "StackChanged": "roost.stack.events",
    "BackNavigationGuard": "roost.stack.guard",
    "GuardState": "roost.stack.guard",
    "VetoDecision": "roost.stack.guard",
    "NavigationStack": "roost.stack.navigation",
    "with_name": "roost.stack.navigation",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import roost`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    import importlib

    module = importlib.import_module(module_path)
    return getattr(module, name)
