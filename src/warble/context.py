"""Request-scoped context via ContextVar.

Provides ``request_var``: the current ``Request`` for this task/thread.
Set by the host adapter around each dispatch and reset afterwards. The
default container reads it to serve the request service.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local across
    worker threads. No locks needed.
"""

from contextvars import ContextVar

from warble.http.request import Request

request_var: ContextVar[Request] = ContextVar("warble_request")
"""The current request. Set by the host adapter before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()
