"""Route resolution — named request to PageDescriptor.

Resolution runs three stages, each tried only if the previous one
produced nothing:

1. Table — exact name lookup in the ``RouteTable``
2. Generator — compiled pattern routes, then generator functions in
   registration order; each may return ``None`` for "no match"
3. Fallback — always produces a page (typically "not found")

The table always wins: a generator that could also answer a name in
the table is never consulted for it.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from roost._internal.types import FallbackFactory, PageFactory, RouteGenerator
from roost.errors import ConfigurationError, NoFallbackError
from roost.routing.patterns import PatternRoute, PatternRouter
from roost.routing.route import PageDescriptor, RouteRequest
from roost.routing.table import RouteTable

logger = logging.getLogger("roost.routing")


class ResolutionStage(Enum):
    TABLE = "table"
    GENERATOR = "generator"
    FALLBACK = "fallback"


def _to_descriptor(request: RouteRequest, page: Any) -> PageDescriptor:
    if isinstance(page, PageDescriptor):
        return page
    return PageDescriptor.for_request(request, page)


class RouteResolver:
    """Resolve ``RouteRequest`` objects into ``PageDescriptor`` objects.

    Usage::

        resolver = RouteResolver(table)
        resolver.add_pattern("/user/{id:int}", UserPage)
        resolver.set_fallback(lambda request: NotFoundPage(request.name))
        resolver.validate()
        page = resolver.resolve(RouteRequest("/user/42"))
    """

    __slots__ = ("_fallback", "_generators", "_patterns", "_table", "_validated")

    def __init__(self, table: RouteTable) -> None:
        self._table = table
        self._patterns = PatternRouter()
        self._generators: list[RouteGenerator] = []
        self._fallback: FallbackFactory | None = None
        self._validated = False

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def patterns(self) -> PatternRouter:
        return self._patterns

    @property
    def has_fallback(self) -> bool:
        return self._fallback is not None

    # -- Setup --

    def add_pattern(self, pattern: str, factory: PageFactory) -> PatternRoute:
        """Register a pattern route answering in the generator stage."""
        self._check_not_validated()
        return self._patterns.add(pattern, factory)

    def add_generator(self, generator: RouteGenerator) -> None:
        """Register a generator. It receives the full ``RouteRequest``."""
        self._check_not_validated()
        if not callable(generator):
            msg = f"Route generator must be callable, got {type(generator).__name__}."
            raise ConfigurationError(msg)
        self._generators.append(generator)

    def set_fallback(self, fallback: FallbackFactory) -> None:
        """Register the fallback. Replaces any previous one."""
        self._check_not_validated()
        if not callable(fallback):
            msg = f"Fallback must be callable, got {type(fallback).__name__}."
            raise ConfigurationError(msg)
        self._fallback = fallback

    def validate(self) -> None:
        """Check the pipeline is complete and freeze it.

        Raises ``NoFallbackError`` when no fallback is registered.
        Idempotent.
        """
        if self._validated:
            return
        if self._fallback is None:
            raise NoFallbackError
        self._table.freeze()
        self._patterns.compile()
        self._validated = True

    def _check_not_validated(self) -> None:
        if self._validated:
            msg = "Cannot modify the resolver after validation."
            raise ConfigurationError(msg)

    # -- Resolution --

    def resolve(self, request: RouteRequest) -> PageDescriptor:
        """Resolve *request* into a page. Never returns None."""
        self.validate()
        stage, descriptor = self._resolve(request)
        logger.debug("Resolved %r via %s stage", request.name, stage.value)
        return descriptor

    def resolve_name(self, name: str, arguments: Any = None) -> PageDescriptor:
        return self.resolve(RouteRequest(name, arguments))

    def stage_for(self, request: RouteRequest) -> ResolutionStage:
        """Report which stage would answer *request* (resolves it)."""
        self.validate()
        stage, _ = self._resolve(request)
        return stage

    def _resolve(self, request: RouteRequest) -> tuple[ResolutionStage, PageDescriptor]:
        # 1. Table
        route = self._table.lookup(request.name)
        if route is not None:
            content = route.build(request.arguments)
            return ResolutionStage.TABLE, PageDescriptor.for_request(request, content)

        # 2. Generators: compiled patterns first, then functions
        match = self._patterns.match(request.name)
        if match is not None:
            page = match.route.build(match.params, request.arguments)
            return ResolutionStage.GENERATOR, _to_descriptor(request, page)

        for generator in self._generators:
            page = generator(request)
            if page is not None:
                return ResolutionStage.GENERATOR, _to_descriptor(request, page)

        # 3. Fallback
        fallback: Callable[..., Any] | None = self._fallback
        if fallback is None:
            raise NoFallbackError
        page = fallback(request)
        if page is None:
            msg = (
                f"Fallback returned None for {request.name!r}. "
                "The fallback must always produce a page."
            )
            raise NoFallbackError(msg)
        return ResolutionStage.FALLBACK, _to_descriptor(request, page)
