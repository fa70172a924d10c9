"""Route collection: registration bookkeeping and dispatcher factory.

Mutable during setup. ``get_dispatcher()`` freezes it: the route table
handed to the dispatcher never changes afterwards.
"""

import itertools
import threading
from collections.abc import Iterable
from typing import Any

from warble.config import DispatchConfig
from warble.container import Container, default_container
from warble.dispatch.dispatcher import Dispatcher
from warble.errors import ConfigurationError
from warble.routing.route import Route, RouteEntry, Strategy, as_strategy
from warble.routing.router import Router


class RouteCollection:
    """Collects routes and builds a ``Dispatcher`` over them.

    Usage::

        routes = RouteCollection()
        routes.set_strategy(Strategy.RESTFUL)
        routes.get("/users/{id}", "app.controllers.Users::show")
        routes.post("/users", create_user)

        dispatcher = routes.get_dispatcher()
        response = dispatcher.dispatch("GET", "/users/42")

    String handlers are their own handler id. Any other handler gets a
    generated id and is stored as the route entry's callback.
    """

    __slots__ = (
        "_config",
        "_container",
        "_entries",
        "_frozen",
        "_ids",
        "_lock",
        "_router",
        "_routes",
        "_strategy",
    )

    def __init__(
        self,
        container: Container | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        self._config: DispatchConfig = config or DispatchConfig()
        self._container: Container = container or default_container(self._config)
        self._router = Router()
        self._routes: list[Route] = []
        self._entries: dict[str, RouteEntry] = {}
        self._strategy: Strategy | None = self._config.strategy
        self._ids = itertools.count(1)
        self._frozen = False
        self._lock = threading.Lock()

    # -- Registration --

    def map(
        self,
        methods: str | Iterable[str],
        path: str,
        handler: Any,
        *,
        strategy: Strategy | int | None = None,
    ) -> Route:
        """Register *handler* for *methods* on *path*.

        Args:
            methods: One HTTP method or several. Case-insensitive.
            path: URL path pattern. Use ``{param}`` for path parameters.
            handler: A callable, a ``"service.id::method"`` string, or any
                other reference the dispatcher should resolve.
            strategy: Strategy for this route. Defaults to the config's
                ``default_strategy``.
        """
        self._check_not_frozen()
        if isinstance(methods, str):
            methods = (methods,)
        method_tuple = tuple(m.upper() for m in methods)
        if not method_tuple:
            msg = f"Route {path!r} must accept at least one HTTP method."
            raise ConfigurationError(msg)

        chosen = self._config.default_strategy if strategy is None else strategy
        route_strategy = as_strategy(chosen)

        if isinstance(handler, str):
            handler_id, callback = handler, None
        else:
            name = getattr(handler, "__qualname__", type(handler).__name__)
            handler_id, callback = f"{name}#{next(self._ids)}", handler

        route = Route(path=path, methods=method_tuple, handler_id=handler_id)
        self._router.add(route)
        self._routes.append(route)
        self._entries[handler_id] = RouteEntry(strategy=route_strategy, callback=callback)
        return route

    def get(self, path: str, handler: Any, *, strategy: Strategy | int | None = None) -> Route:
        """Register a GET route."""
        return self.map("GET", path, handler, strategy=strategy)

    def post(self, path: str, handler: Any, *, strategy: Strategy | int | None = None) -> Route:
        """Register a POST route."""
        return self.map("POST", path, handler, strategy=strategy)

    def put(self, path: str, handler: Any, *, strategy: Strategy | int | None = None) -> Route:
        """Register a PUT route."""
        return self.map("PUT", path, handler, strategy=strategy)

    def patch(self, path: str, handler: Any, *, strategy: Strategy | int | None = None) -> Route:
        """Register a PATCH route."""
        return self.map("PATCH", path, handler, strategy=strategy)

    def delete(self, path: str, handler: Any, *, strategy: Strategy | int | None = None) -> Route:
        """Register a DELETE route."""
        return self.map("DELETE", path, handler, strategy=strategy)

    def head(self, path: str, handler: Any, *, strategy: Strategy | int | None = None) -> Route:
        """Register a HEAD route."""
        return self.map("HEAD", path, handler, strategy=strategy)

    def options(self, path: str, handler: Any, *, strategy: Strategy | int | None = None) -> Route:
        """Register an OPTIONS route."""
        return self.map("OPTIONS", path, handler, strategy=strategy)

    # -- Global strategy --

    def set_strategy(self, strategy: Strategy | int | None) -> None:
        """Set the global strategy override for dispatchers built from here."""
        self._check_not_frozen()
        self._strategy = None if strategy is None else as_strategy(strategy)

    @property
    def strategy(self) -> Strategy | None:
        return self._strategy

    # -- Introspection --

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes, in registration order."""
        return tuple(self._routes)

    @property
    def container(self) -> Container:
        return self._container

    def entry(self, handler_id: str) -> RouteEntry:
        """The route entry for *handler_id*.

        Raises ``KeyError`` if nothing is registered under it.
        """
        return self._entries[handler_id]

    # -- Freeze --

    def get_dispatcher(self) -> Dispatcher:
        """Freeze the collection and build a dispatcher over it.

        Safe to call more than once; each call returns a new dispatcher
        over the same frozen table.
        """
        with self._lock:
            if not self._frozen:
                self._router.compile()
                self._frozen = True

        dispatcher = Dispatcher(self._router, self._entries, self._container, self._config)
        dispatcher.set_strategy(self._strategy)
        return dispatcher

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify routes after get_dispatcher() has been called."
            raise ConfigurationError(msg)
