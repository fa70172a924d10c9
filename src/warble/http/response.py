"""HTTP responses with a chainable .with_*() transformation API.

Each transformation returns a new response of the same type; the
original is never modified.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from numbers import Number
from typing import Any

from warble.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_value(cls, value: Any) -> Response:
        """Build a response whose body is *value*.

        Accepts ``None`` (empty body), ``str``, ``bytes``, numbers, and
        objects whose class defines its own ``__str__``.

        Raises ``TypeError`` for anything else.
        """
        if value is None:
            return cls()
        if isinstance(value, (str, bytes)):
            return cls(body=value)
        if isinstance(value, Number) or type(value).__str__ is not object.__str__:
            return cls(body=str(value))
        msg = f"Cannot use {type(value).__name__} as a response body."
        raise TypeError(msg)

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Read back --

    @property
    def header_map(self) -> Headers:
        """Headers as a case-insensitive mapping."""
        return Headers(self.headers)

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class JsonResponse(Response):
    """A response whose body is a serialized JSON document."""

    content_type: str = "application/json"

    @classmethod
    def from_data(
        cls,
        data: Any,
        status: int = 200,
        *,
        ensure_ascii: bool = False,
    ) -> JsonResponse:
        """Serialize *data* compactly and wrap it.

        Raises ``TypeError`` if *data* is not JSON-serializable.
        """
        body = json_module.dumps(data, separators=(",", ":"), ensure_ascii=ensure_ascii)
        return cls(body=body, status=status)

    @property
    def data(self) -> Any:
        """The decoded JSON body."""
        return json_module.loads(self.body_bytes)
