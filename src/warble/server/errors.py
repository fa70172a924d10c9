"""Host-level error rendering.

Errors that propagate out of ``Dispatcher.dispatch()`` land here: HTTP
errors become HTML pages with their status and headers, anything else
is logged and becomes a 500.
"""

import logging

from kida import Environment

from warble.errors import HTTPError, reason_phrase
from warble.http.request import Request
from warble.http.response import Response

logger = logging.getLogger("warble.server")

_ERROR_PAGE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{{ status }} {{ reason }}</title></head>
<body>
<h1>{{ status }} {{ reason }}</h1>
<p>{{ detail }}</p>
</body>
</html>
"""

_env = Environment(autoescape=True)
_template = _env.from_string(_ERROR_PAGE)


def render_error_page(status: int, detail: str = "") -> str:
    """Render the default HTML error page."""
    return _template.render({"status": status, "reason": reason_phrase(status), "detail": detail})


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to an HTML response, keeping its headers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.message)

    detail = exc.detail if exc.detail and exc.detail != reason_phrase(exc.status) else ""
    response = Response(body=render_error_page(exc.status, detail), status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, *, debug: bool = False) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    detail = f"{type(exc).__name__}: {exc}" if debug else ""
    return Response(body=render_error_page(500, detail), status=500)
