"""Route metadata, strategies, and match outcomes as frozen dataclasses."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from warble.errors import ConfigurationError


class Strategy(IntEnum):
    """Calling convention and response-coercion rules for a matched handler.

    Integer values are stable so strategies can be stored or sent as ints.
    """

    REQUEST_RESPONSE = 0
    """Handler receives ``(request, response)`` and returns a ``Response``."""

    RESTFUL = 1
    """Handler receives ``(request)`` and returns JSON-able data or a ``JsonResponse``."""

    URI = 2
    """Handler receives path variables positionally; the return value becomes the body."""


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """Registered metadata for one handler id.

    ``callback`` holds the handler when it isn't its own id (functions,
    bound methods, lambdas). String handlers leave it ``None`` and the id
    itself is resolved.
    """

    strategy: Strategy = Strategy.REQUEST_RESPONSE
    callback: Any = None


@dataclass(frozen=True, slots=True)
class Route:
    """A registered method set + path pattern pointing at a handler id."""

    path: str
    methods: tuple[str, ...]
    handler_id: str


# -- Match outcomes --


@dataclass(frozen=True, slots=True)
class Found:
    """The path and method matched a route."""

    handler_id: str
    path_params: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Missing:
    """No route matches the path."""


@dataclass(frozen=True, slots=True)
class WrongMethod:
    """A route matches the path but not the method."""

    allowed: tuple[str, ...]


MatchOutcome = Found | Missing | WrongMethod


def as_strategy(value: Strategy | int) -> Strategy:
    """Coerce *value* to a ``Strategy``.

    Raises ``ConfigurationError`` for anything that isn't a strategy value.
    """
    if isinstance(value, Strategy):
        return value
    msg = f"Unknown route strategy {value!r}."
    # bool is an int subclass but never a strategy value
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigurationError(msg)
    try:
        return Strategy(value)
    except ValueError as exc:
        raise ConfigurationError(msg) from exc
