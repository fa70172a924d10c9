"""Warble: the dispatch layer of an HTTP micro-framework.

Given a matched route, warble decides how to call the handler and how
to turn what it returns into a response. Three strategies:

- ``Strategy.REQUEST_RESPONSE``: ``handler(request, response) -> Response``
- ``Strategy.RESTFUL``: ``handler(request) -> dict | list | JsonResponse``,
  HTTP errors become JSON bodies
- ``Strategy.URI``: ``handler(*path_values) -> Response | body``

Basic usage::

    from warble import RouteCollection, Strategy

    routes = RouteCollection()
    routes.set_strategy(Strategy.URI)
    routes.get("/hello/{name}", lambda name: f"Hello, {name}!")

    dispatcher = routes.get_dispatcher()
    dispatcher.dispatch("GET", "/hello/world").text  # "Hello, world!"
"""

__version__ = "0.1.0"
__all__ = [
    "ASGIApp",
    "ConfigurationError",
    "Container",
    "DispatchConfig",
    "Dispatcher",
    "HTTPError",
    "JsonRenderable",
    "JsonResponse",
    "MethodNotAllowed",
    "NotFound",
    "Request",
    "Response",
    "RouteCollection",
    "RouteEntry",
    "Router",
    "Strategy",
    "WarbleError",
    "get_request",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "ASGIApp": "warble.server.asgi",
    "ConfigurationError": "warble.errors",
    "Container": "warble.container",
    "DispatchConfig": "warble.config",
    "Dispatcher": "warble.dispatch.dispatcher",
    "HTTPError": "warble.errors",
    "JsonRenderable": "warble.errors",
    "JsonResponse": "warble.http.response",
    "MethodNotAllowed": "warble.errors",
    "NotFound": "warble.errors",
    "Request": "warble.http.request",
    "Response": "warble.http.response",
    "RouteCollection": "warble.routing.collection",
    "RouteEntry": "warble.routing.route",
    "Router": "warble.routing.router",
    "Strategy": "warble.routing.route",
    "WarbleError": "warble.errors",
    "get_request": "warble.context",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warble`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module 'warble' has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_path), name)
