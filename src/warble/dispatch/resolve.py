"""Handler resolution: normalizes a handler reference into a closed variant.

A handler reference is whatever was registered for a route:

- a callable (function, lambda, bound method, callable instance)
- a ``"service.id::method"`` string, resolved through the container at
  call time
- any other string, taken as the name of a function (``"pkg.mod.func"``,
  ``"pkg.mod:func"`` or a builtin such as ``"len"``) and looked up at
  call time
- anything else, kept as-is and rejected only when invoked

Resolution never imports anything. Lookups happen in ``bind()``.
"""

import builtins
import pkgutil
from dataclasses import dataclass
from typing import Any

SERVICE_SEPARATOR = "::"


@dataclass(frozen=True, slots=True)
class DirectHandler:
    """A handler that can be called as-is."""

    func: Any


@dataclass(frozen=True, slots=True)
class ServiceMethod:
    """A method on a container service, looked up fresh on every dispatch."""

    service_id: str
    method_name: str


@dataclass(frozen=True, slots=True)
class NamedFunction:
    """A function referenced by name, looked up when invoked."""

    name: str


@dataclass(frozen=True, slots=True)
class OpaqueHandler:
    """A reference that is not invocable as far as resolution can tell."""

    value: Any


ResolvedHandler = DirectHandler | ServiceMethod | NamedFunction | OpaqueHandler


def lookup_function(name: str) -> Any | None:
    """Return the callable *name* points at, or ``None``.

    Undotted names are looked up in ``builtins`` only. Errors raised
    while importing the target module, other than a missing module or
    attribute, propagate.
    """
    if "." not in name and ":" not in name:
        target = getattr(builtins, name, None)
    else:
        try:
            target = pkgutil.resolve_name(name)
        except (ImportError, AttributeError, ValueError):
            return None
    return target if callable(target) else None


def resolve_handler(reference: Any) -> ResolvedHandler:
    """Normalize *reference* into a ``ResolvedHandler``.

    Service references win over function names, so ``"pkg.Cls::run"``
    always goes through the container. Nothing here touches the container,
    imports, or raises: a bad reference surfaces when it is invoked.
    """
    if isinstance(reference, str):
        if SERVICE_SEPARATOR in reference:
            service_id, _, method_name = reference.partition(SERVICE_SEPARATOR)
            return ServiceMethod(service_id, method_name)
        return NamedFunction(reference)

    if callable(reference):
        return DirectHandler(reference)
    return OpaqueHandler(reference)
