"""Pattern routes with trie-based name matching.

Pattern routes answer in the generator stage of resolution, after the
exact-name table. They are registered during setup and compiled into an
immutable lookup structure when the navigator freezes.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from roost._internal.invoke import accepts_keyword
from roost.errors import ConfigurationError, DuplicateRouteError
from roost.routing.params import CONVERTERS, convert_params

_FLASK_PARAM = re.compile(r"^<[^>]+>$")


@dataclass(frozen=True, slots=True)
class PatternSegment:
    """A parsed segment of a route pattern.

    Static:  ``/user``       (is_param=False)
    Param:   ``/{name}``     (is_param=True, param_name="name")
    Typed:   ``/{id:int}``   (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class PatternRoute:
    """A frozen pattern route.

    ``wants_arguments`` is decided once at registration: the factory is
    passed the request's arguments only when it declares ``arguments``.
    """

    pattern: str
    factory: Callable[..., Any]
    param_types: dict[str, str] = field(default_factory=dict)
    wants_arguments: bool = False

    def build(self, params: dict[str, Any], arguments: Any) -> Any:
        if self.wants_arguments:
            return self.factory(**params, arguments=arguments)
        return self.factory(**params)


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Result of a successful pattern match. ``params`` are converted."""

    route: PatternRoute
    params: dict[str, Any]


def parse_pattern(pattern: str) -> list[PatternSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/user"             -> [PatternSegment("user")]
        "/user/{id:int}"    -> [PatternSegment("user"), PatternSegment("{id:int}", is_param=True, ...)]
        "/docs/{rest:path}" -> [PatternSegment("docs"), PatternSegment("{rest:path}", ...)]

    Raises ``ConfigurationError`` for ``<param>`` segments and unknown
    parameter types.
    """
    segments: list[PatternSegment] = []
    for part in pattern.strip("/").split("/"):
        if not part:
            continue
        if _FLASK_PARAM.match(part):
            msg = (
                f"Route pattern {pattern!r} uses <param> syntax. "
                "Roost patterns use {param} or {param:type}."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name, param_type = inner, "str"
            if param_type not in CONVERTERS:
                msg = (
                    f"Unknown parameter type {param_type!r} in route pattern {pattern!r}. "
                    f"Known types: {', '.join(sorted(CONVERTERS))}."
                )
                raise ConfigurationError(msg)
            segments.append(
                PatternSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PatternSegment(value=part))
    return segments


def is_pattern(name: str) -> bool:
    """Return True if *name* contains at least one ``{param}`` segment."""
    return any(seg.is_param for seg in parse_pattern(name))


class _TrieNode:
    """A node in the pattern trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_child", "route")

    def __init__(self) -> None:
        # Static segment children: "user" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all (path converter) consuming the rest of the name
        self.catch_all: _CatchAllEdge | None = None
        self.route: PatternRoute | None = None


@dataclass(slots=True)
class _ParamEdge:
    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    param_name: str
    route: PatternRoute


class PatternRouter:
    """Compiled pattern router.

    Usage::

        router = PatternRouter()
        router.add("/user/{id:int}", lambda id: UserPage(id))
        router.compile()
        match = router.match("/user/42")
        match.params  # {"id": 42}

    Static segments are tried before parameters, parameters before
    catch-all, so ``/user/me`` beats ``/user/{name}``.
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[PatternRoute] = []
        self._compiled = False

    def __len__(self) -> int:
        return len(self._routes)

    @property
    def routes(self) -> list[PatternRoute]:
        """All registered pattern routes, in registration order."""
        return list(self._routes)

    def add(self, pattern: str, factory: Callable[..., Any]) -> PatternRoute:
        """Add a pattern route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add pattern routes after compilation."
            raise ConfigurationError(msg)

        segments = parse_pattern(pattern)
        param_types = {
            seg.param_name: seg.param_type for seg in segments if seg.is_param and seg.param_name
        }
        route = PatternRoute(
            pattern=pattern,
            factory=factory,
            param_types=param_types,
            wants_arguments=accepts_keyword(factory, "arguments"),
        )

        node = self._root
        for seg in segments:
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes the rest of the name, must be last
                if node.catch_all is not None:
                    raise DuplicateRouteError(pattern)
                node.catch_all = _CatchAllEdge(param_name=seg.param_name or "path", route=route)
                self._routes.append(route)
                return route

            if seg.is_param:
                if node.param_child is None:
                    regex, _ = CONVERTERS[seg.param_type]
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        param_type=seg.param_type,
                        regex=re.compile(f"^{regex}$"),
                        node=_TrieNode(),
                    )
                elif (
                    node.param_child.param_name != seg.param_name
                    or node.param_child.param_type != seg.param_type
                ):
                    msg = (
                        f"Route pattern {pattern!r} conflicts with an existing parameter "
                        f"{{{node.param_child.param_name}:{node.param_child.param_type}}} "
                        "at the same position."
                    )
                    raise ConfigurationError(msg)
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        if node.route is not None:
            raise DuplicateRouteError(pattern)
        node.route = route
        self._routes.append(route)
        return route

    def compile(self) -> None:
        """Freeze the router. No more patterns can be added."""
        self._compiled = True

    def match(self, name: str) -> PatternMatch | None:
        """Match a route name against the compiled patterns.

        Returns ``None`` when nothing matches or a captured segment
        fails conversion.
        """
        parts = [p for p in name.split("?", 1)[0].strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})
        if result is None:
            return None
        route, raw = result
        try:
            params = convert_params(raw, route.param_types)
        except ValueError:
            return None
        return PatternMatch(route=route, params=params)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[PatternRoute, dict[str, str]] | None:
        """Recursively match name parts against the trie."""
        if index == len(parts):
            if node.route is not None:
                return node.route, params
            return None

        part = parts[index]

        # 1. Static child (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Parameter child
        if node.param_child is not None:
            edge = node.param_child
            if edge.regex.match(part):
                result = self._match_node(
                    edge.node, parts, index + 1, {**params, edge.param_name: part}
                )
                if result is not None:
                    return result

        # 3. Catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.route, {**params, node.catch_all.param_name: remaining}

        return None
