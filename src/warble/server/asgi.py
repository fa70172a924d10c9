"""ASGI adapter: the host layer around a synchronous Dispatcher.

Reads the request body, runs ``dispatch()`` in a worker thread with the
request bound to ``request_var``, and renders whatever propagates.
"""

from collections.abc import MutableMapping
from typing import Any

import anyio.to_thread

from warble._internal.asgi import Receive, Scope, Send
from warble.context import request_var
from warble.dispatch.dispatcher import Dispatcher
from warble.errors import HTTPError
from warble.http.request import Request
from warble.http.response import Response
from warble.server.errors import handle_http_error, handle_internal_error
from warble.server.sender import send_response


async def read_body(receive: Receive) -> bytes:
    """Drain ``http.request`` messages into one body."""
    chunks: list[bytes] = []
    while True:
        message: MutableMapping[str, Any] = await receive()
        if message["type"] == "http.disconnect":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


class ASGIApp:
    """Serve a ``Dispatcher`` as an ASGI 3 application.

    Usage::

        routes = RouteCollection()
        routes.get("/", index)
        app = ASGIApp(routes.get_dispatcher())

    Errors that the active strategy lets propagate are rendered here:
    ``HTTPError`` as an HTML page with its status and headers, anything
    else as a logged 500. *debug* defaults to the dispatcher's
    ``DispatchConfig.debug``.
    """

    __slots__ = ("_debug", "_dispatcher")

    def __init__(self, dispatcher: Dispatcher, *, debug: bool | None = None) -> None:
        self._dispatcher = dispatcher
        self._debug = dispatcher.config.debug if debug is None else debug

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, await read_body(receive))
        try:
            response = await anyio.to_thread.run_sync(self._dispatch, request)
        except HTTPError as exc:
            response = handle_http_error(exc, request)
        except Exception as exc:
            response = handle_internal_error(exc, request, debug=self._debug)

        await send_response(response, send)

    def _dispatch(self, request: Request) -> Response:
        token = request_var.set(request)
        try:
            return self._dispatcher.dispatch(request.method, request.path)
        finally:
            request_var.reset(token)

    @staticmethod
    async def _lifespan(receive: Receive, send: Send) -> None:
        # Nothing to set up; acknowledge so servers proceed
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
