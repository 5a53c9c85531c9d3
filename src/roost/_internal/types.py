"""Shared type aliases used across roost modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Page factory: builds page content, optionally from route arguments
PageFactory: TypeAlias = Callable[..., Any]

# Generator: receives a RouteRequest, returns a page or None for "no match"
RouteGenerator: TypeAlias = Callable[..., Any]

# Fallback: receives a RouteRequest, always returns a page
FallbackFactory: TypeAlias = Callable[..., Any]

# Guard: receives (descriptor, result), returns a decision or an awaitable of one
GuardFunction: TypeAlias = Callable[..., Any]
