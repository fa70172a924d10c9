"""Trie-based matcher implementing the dispatcher's matcher contract.

``match(method, path)`` never raises for unmatched requests; it returns
one of the three match outcomes from ``warble.routing.route``.
"""

import re
from dataclasses import dataclass, field
from typing import Protocol

from warble.errors import ConfigurationError
from warble.routing.params import CONVERTERS
from warble.routing.route import Found, MatchOutcome, Missing, Route, WrongMethod


class Matcher(Protocol):
    """Anything that can turn a method + path into a match outcome."""

    def match(self, method: str, path: str) -> MatchOutcome: ...


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One ``/``-separated piece of a route pattern.

    ``users`` is static; ``{id}`` and ``{id:int}`` are parameters with
    a converter name (``"str"`` when omitted).
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


def _parse_segment(path: str, part: str) -> PathSegment:
    if part.startswith("<") and part.endswith(">"):
        msg = (
            f"Route {path!r} uses <param> placeholders. "
            "Use {param} instead, e.g. '/users/{id}'."
        )
        raise ConfigurationError(msg)
    if not (part.startswith("{") and part.endswith("}")):
        return PathSegment(value=part)

    name, _, converter = part[1:-1].partition(":")
    converter = converter or "str"
    if converter not in CONVERTERS:
        msg = f"Unknown path converter {converter!r} in route {path!r}."
        raise ConfigurationError(msg)
    return PathSegment(value=part, is_param=True, param_name=name, param_type=converter)


def parse_path(path: str) -> list[PathSegment]:
    """Split a route pattern into segments, ignoring empty pieces.

    Raises ``ConfigurationError`` for ``<param>`` placeholders and
    unknown converter types.
    """
    return [_parse_segment(path, part) for part in path.split("/") if part]


@dataclass(slots=True)
class _Node:
    # Route per method, in registration order
    methods: dict[str, Route] = field(default_factory=dict)
    static: dict[str, "_Node"] = field(default_factory=dict)
    param: "_Param | None" = None
    # {name:path} segment: the rest of the path goes to one parameter
    tail_name: str | None = None
    tail: "_Node | None" = None


@dataclass(slots=True)
class _Param:
    name: str
    pattern: re.Pattern[str]
    node: _Node


class Router:
    """Route table with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/users", ("GET",), "users.list"))
        router.add(Route("/users/{id:int}", ("GET",), "users.show"))
        router.compile()
        outcome = router.match("GET", "/users/42")

    Static segments are preferred over parameters, and parameters over
    a trailing ``{name:path}``.
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _Node()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Register *route*. Only allowed before ``compile()``."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise ConfigurationError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.param_type == "path" and seg.is_param:
                if node.tail is None:
                    node.tail_name = seg.param_name or "path"
                    node.tail = _Node()
                node = node.tail
                break
            if seg.is_param:
                node = self._param_child(node, route, seg)
            else:
                node = node.static.setdefault(seg.value, _Node())

        for method in route.methods:
            node.methods[method] = route

    @staticmethod
    def _param_child(node: _Node, route: Route, seg: PathSegment) -> _Node:
        name = seg.param_name or ""
        if node.param is None:
            pattern = re.compile(f"^{CONVERTERS[seg.param_type]}$")
            node.param = _Param(name=name, pattern=pattern, node=_Node())
        elif node.param.name != name:
            msg = (
                f"Route {route.path!r} names parameter {name!r} where "
                f"another route already uses {node.param.name!r}."
            )
            raise ConfigurationError(msg)
        return node.param.node

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> MatchOutcome:
        """Match a request method and path against the route table.

        Returns ``Found`` with path parameters in path order, ``Missing``
        when no route matches the path, or ``WrongMethod`` listing the
        registered methods in registration order.
        """
        parts = [p for p in path.split("/") if p]
        hit = self._walk(self._root, parts, {})
        if hit is None:
            return Missing()

        node, params = hit
        route = node.methods.get(method.upper())
        if route is None:
            return WrongMethod(allowed=tuple(node.methods))
        return Found(handler_id=route.handler_id, path_params=params)

    def _walk(
        self,
        node: _Node,
        parts: list[str],
        params: dict[str, str],
    ) -> tuple[_Node, dict[str, str]] | None:
        if not parts:
            return (node, params) if node.methods else None

        head, rest = parts[0], parts[1:]

        child = node.static.get(head)
        if child is not None:
            hit = self._walk(child, rest, params)
            if hit is not None:
                return hit

        if node.param is not None and node.param.pattern.match(head):
            hit = self._walk(node.param.node, rest, {**params, node.param.name: head})
            if hit is not None:
                return hit

        if node.tail is not None and node.tail.methods:
            return node.tail, {**params, node.tail_name or "path": "/".join(parts)}

        return None
