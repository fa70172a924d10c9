"""Invoker: calls a resolved handler and reports how it ended.

Invocation covers everything needed to make the call: resolving the
handler's arguments, looking up its service or function, and calling
it. Errors raised anywhere in there that know their canonical JSON
response (``JsonRenderable``, which includes every ``HTTPError``) are
captured as ``Raised`` instead of propagating, so the dispatcher decides
per strategy whether to convert them (RESTful) or re-raise them
(everything else). Any other exception propagates untouched.

Usage::

    outcome = invoke(resolved, lambda: (request,), container.get)
    match outcome:
        case Returned(value):
            ...
        case Raised(error):
            ...
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from warble.dispatch.resolve import (
    DirectHandler,
    NamedFunction,
    OpaqueHandler,
    ResolvedHandler,
    ServiceMethod,
    lookup_function,
)
from warble.errors import ConfigurationError, JsonRenderable


@dataclass(frozen=True, slots=True)
class Returned:
    """The handler returned normally."""

    value: Any


@dataclass(frozen=True, slots=True)
class Raised:
    """Invocation raised an error that can render itself as JSON."""

    error: Exception


Invocation = Returned | Raised


def bind(handler: ResolvedHandler, resolve_service: Callable[[str], Any]) -> Callable[..., Any]:
    """Turn a resolved handler into something callable.

    ``ServiceMethod`` handlers fetch their service through
    *resolve_service* on every call. ``NamedFunction`` handlers are
    looked up by name on every call.

    Raises ``ConfigurationError`` if the handler cannot be called.
    """
    match handler:
        case DirectHandler(func):
            return func
        case ServiceMethod(service_id, method_name):
            service = resolve_service(service_id)
            method = getattr(service, method_name, None)
            if not callable(method):
                msg = (
                    f"Service {service_id!r} ({type(service).__name__}) has no "
                    f"callable method {method_name!r}."
                )
                raise ConfigurationError(msg)
            return method
        case NamedFunction(name):
            func = lookup_function(name)
            if func is None:
                msg = f"Route handler {name!r} is not callable."
                raise ConfigurationError(msg)
            return func
        case OpaqueHandler(value):
            msg = f"Route handler {value!r} is not callable."
            raise ConfigurationError(msg)
    msg = f"Unsupported handler reference {handler!r}."
    raise ConfigurationError(msg)


def invoke(
    handler: ResolvedHandler,
    resolve_args: Callable[[], Sequence[Any]],
    resolve_service: Callable[[str], Any],
) -> Invocation:
    """Resolve arguments and handler, then call it with positional args."""
    try:
        args = resolve_args()
        func = bind(handler, resolve_service)
        return Returned(func(*args))
    except Exception as exc:
        if isinstance(exc, JsonRenderable):
            return Raised(exc)
        raise
