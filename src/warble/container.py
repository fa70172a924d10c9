"""Injection container: resolves service ids to ready-to-use instances.

The dispatcher only ever calls ``get(service_id)``. Resolution order:

1. An instance registered with ``instance()``
2. A factory registered with ``provide()``, called on every ``get()``
3. The id itself as an import path (``"pkg.mod.Class"`` or
   ``"pkg.mod:Class"``), imported and called with no arguments

Factories run fresh each time, so class-based handlers resolved through
the container never share state across requests.
"""

import importlib
import threading
from collections.abc import Callable
from typing import Any

from warble.config import DispatchConfig
from warble.context import request_var
from warble.errors import ConfigurationError
from warble.http.request import Request
from warble.http.response import Response


def _import_target(service_id: str) -> Any:
    """Import the object named by *service_id*.

    Raises ``ImportError`` or ``AttributeError`` when it cannot be found.
    """
    if ":" in service_id:
        module_path, _, attr_name = service_id.partition(":")
    else:
        module_path, _, attr_name = service_id.rpartition(".")
    if not module_path or not attr_name:
        msg = f"{service_id!r} is not an import path"
        raise ImportError(msg)
    module = importlib.import_module(module_path)
    return getattr(module, attr_name)


class Container:
    """A small injection container keyed by string service ids.

    Usage::

        container = Container()
        container.provide("app.UserController", lambda: UserController(db))
        controller = container.get("app.UserController")

    Thread safety:
        Registration and lookup of the registry dicts are guarded by a
        lock. Factories themselves run outside the lock, so independent
        services resolve concurrently.
    """

    __slots__ = ("_factories", "_instances", "_lock")

    def __init__(self) -> None:
        self._factories: dict[str, Callable[[], Any]] = {}
        self._instances: dict[str, Any] = {}
        self._lock = threading.Lock()

    def provide(self, service_id: str, factory: Callable[[], Any]) -> None:
        """Register a zero-argument factory for *service_id*."""
        with self._lock:
            self._instances.pop(service_id, None)
            self._factories[service_id] = factory

    def instance(self, service_id: str, value: Any) -> None:
        """Register a shared, already-built value for *service_id*."""
        with self._lock:
            self._factories.pop(service_id, None)
            self._instances[service_id] = value

    def has(self, service_id: str) -> bool:
        """Whether *service_id* is explicitly registered."""
        with self._lock:
            return service_id in self._instances or service_id in self._factories

    def get(self, service_id: str) -> Any:
        """Resolve *service_id* to an instance.

        Raises ``ConfigurationError`` if it cannot be resolved.
        """
        with self._lock:
            if service_id in self._instances:
                return self._instances[service_id]
            factory = self._factories.get(service_id)

        if factory is not None:
            return factory()

        try:
            target = _import_target(service_id)
        except (ImportError, AttributeError) as exc:
            msg = f"Unable to resolve service {service_id!r}: {exc}"
            raise ConfigurationError(msg) from exc

        if not callable(target):
            msg = f"Service {service_id!r} resolved to a non-callable {type(target).__name__}"
            raise ConfigurationError(msg)
        return target()


def _current_request() -> Request:
    # Outside a host adapter there is no request; hand out a blank one
    return request_var.get(Request())


def default_container(config: DispatchConfig | None = None) -> Container:
    """A container with the request and response services registered."""
    config = config or DispatchConfig()
    container = Container()
    container.provide(config.request_service, _current_request)
    container.provide(config.response_service, Response)
    return container
