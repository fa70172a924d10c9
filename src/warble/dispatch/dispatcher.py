"""Dispatcher: matches a request and runs the handler under its strategy.

The only component that knows about all three strategies. Everything it
needs is handed in at construction: the matcher, the route entries, and
the container. The route table is read-only from then on, so one
dispatcher can serve many requests, sequentially or concurrently.
"""

import logging
from collections.abc import Mapping
from typing import Any

from warble.config import DispatchConfig
from warble.container import Container, default_container
from warble.dispatch.coerce import coerce_request_response, coerce_restful, coerce_uri
from warble.dispatch.invoke import Invocation, Raised, Returned, invoke
from warble.dispatch.resolve import ResolvedHandler, resolve_handler
from warble.errors import ConfigurationError, HTTPError, MethodNotAllowed, NotFound
from warble.http.response import Response
from warble.routing.route import Found, Missing, RouteEntry, Strategy, WrongMethod, as_strategy
from warble.routing.router import Matcher

logger = logging.getLogger("warble.dispatch")


class Dispatcher:
    """Match and dispatch a method + URI to a response.

    Usage::

        dispatcher = Dispatcher(router, {"users.show": RouteEntry(Strategy.URI, show)})
        response = dispatcher.dispatch("GET", "/users/42")

    A global strategy set with ``set_strategy()`` overrides every
    route's own strategy, for every dispatch, until cleared.
    """

    __slots__ = ("_config", "_container", "_handlers", "_matcher", "_routes", "_strategy")

    def __init__(
        self,
        matcher: Matcher,
        routes: Mapping[str, RouteEntry],
        container: Container | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        self._config: DispatchConfig = config or DispatchConfig()
        self._matcher = matcher
        self._routes: dict[str, RouteEntry] = dict(routes)
        self._container: Container = container or default_container(self._config)
        self._strategy: Strategy | None = None
        if self._config.strategy is not None:
            self.set_strategy(self._config.strategy)

        # Normalize handler references; lookups happen per dispatch
        self._handlers: dict[str, ResolvedHandler] = {
            handler_id: resolve_handler(handler_id if entry.callback is None else entry.callback)
            for handler_id, entry in self._routes.items()
        }

    # -- Global strategy --

    def set_strategy(self, strategy: Strategy | int | None) -> None:
        """Set (or clear, with ``None``) the global strategy override."""
        self._strategy = None if strategy is None else as_strategy(strategy)

    @property
    def strategy(self) -> Strategy | None:
        """The global strategy override, if any."""
        return self._strategy

    @property
    def container(self) -> Container:
        return self._container

    @property
    def config(self) -> DispatchConfig:
        return self._config

    # -- Dispatch --

    def dispatch(self, method: str, uri: str) -> Response:
        """Match *method* and *uri* and return the handler's response.

        Raises ``NotFound`` / ``MethodNotAllowed`` for unmatched requests
        unless the global strategy is RESTful, in which case their JSON
        representation is returned. Raises ``ConfigurationError`` when a
        handler returns something its strategy can't use.
        """
        outcome = self._matcher.match(method, uri)

        match outcome:
            case Found(handler_id, path_params):
                return self._handle_found(handler_id, path_params)
            case WrongMethod(allowed):
                logger.debug("405 %s %s (allowed: %s)", method, uri, ", ".join(allowed))
                return self._handle_unmatched(MethodNotAllowed(allowed))
            case Missing():
                logger.debug("404 %s %s", method, uri)
                return self._handle_unmatched(NotFound())
        msg = f"Matcher returned an unknown outcome {outcome!r}."
        raise ConfigurationError(msg)

    def _handle_unmatched(self, error: HTTPError) -> Response:
        """Convert under the global RESTful strategy; raise otherwise.

        Per-route strategies play no part here since nothing matched.
        """
        if self._strategy is Strategy.RESTFUL:
            return error.to_json_response()
        raise error

    def _handle_found(self, handler_id: str, path_params: Mapping[str, str]) -> Response:
        entry = self._routes.get(handler_id)
        if entry is None:
            msg = f"No route entry registered for handler {handler_id!r}."
            raise ConfigurationError(msg)

        strategy = self._strategy if self._strategy is not None else as_strategy(entry.strategy)
        handler = self._handlers[handler_id]
        logger.debug("dispatch %s via %s", handler_id, strategy.name)

        match strategy:
            case Strategy.REQUEST_RESPONSE:
                return self._request_response(handler)
            case Strategy.RESTFUL:
                return self._restful(handler)
            case Strategy.URI:
                return self._uri(handler, path_params)
        msg = f"Unknown route strategy {strategy!r}."
        raise ConfigurationError(msg)

    # -- Strategies --

    def _request_response(self, handler: ResolvedHandler) -> Response:
        def arguments() -> tuple[Any, Any]:
            return (
                self._container.get(self._config.request_service),
                self._container.get(self._config.response_service),
            )

        outcome = invoke(handler, arguments, self._container.get)
        return coerce_request_response(self._unwrap(outcome))

    def _restful(self, handler: ResolvedHandler) -> Response:
        def arguments() -> tuple[Any]:
            return (self._container.get(self._config.request_service),)

        outcome = invoke(handler, arguments, self._container.get)
        match outcome:
            case Raised(error):
                logger.debug("%s from RESTful handler: %s", type(error).__name__, error)
                return error.to_json_response()  # type: ignore[attr-defined]
            case Returned(value):
                return coerce_restful(value, ensure_ascii=self._config.json_ensure_ascii)
        msg = f"Unknown invocation outcome {outcome!r}."
        raise ConfigurationError(msg)

    def _uri(self, handler: ResolvedHandler, path_params: Mapping[str, str]) -> Response:
        values = tuple(path_params.values())
        return coerce_uri(self._unwrap(invoke(handler, lambda: values, self._container.get)))

    @staticmethod
    def _unwrap(outcome: Invocation) -> Any:
        """Return the handler's value, re-raising a captured error."""
        if isinstance(outcome, Raised):
            raise outcome.error
        return outcome.value
