"""Immutable HTTP request.

Frozen metadata plus the already-received body. Dispatch is
synchronous, so the body is read in full before the request is built.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl

from warble.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Handlers under the Request -> Response and RESTful strategies receive
    one of these, resolved from the container at dispatch time.
    """

    method: str = "GET"
    path: str = "/"
    headers: Headers = field(default_factory=Headers)
    query_string: str = ""
    body: bytes = b""
    client: tuple[str, int] | None = None

    # -- Computed properties --

    @property
    def query(self) -> Mapping[str, str]:
        """Query parameters, first value wins."""
        result: dict[str, str] = {}
        for key, value in parse_qsl(self.query_string, keep_blank_values=True):
            result.setdefault(key, value)
        return result

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    # -- Body access --

    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], body: bytes = b"") -> Request:
        """Create a Request from an ASGI scope and its fully-read body."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers.from_raw(scope.get("headers", ())),
            query_string=scope.get("query_string", b"").decode("latin-1"),
            body=body,
            client=tuple(client) if client else None,
        )
