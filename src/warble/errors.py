"""Warble exception hierarchy.

Shared across the router, dispatcher, container, and host adapter so
every module raises and catches the same types.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from warble.http.response import JsonResponse


class WarbleError(Exception):
    """Base for all warble-specific errors."""


class ConfigurationError(WarbleError):
    """Raised when routes, handlers, or the container are misconfigured.

    These are programmer errors. They always propagate to the caller of
    ``Dispatcher.dispatch()``, whatever the active strategy.
    """


@runtime_checkable
class JsonRenderable(Protocol):
    """An error that knows its canonical JSON response.

    The RESTful strategy converts any raised exception with this
    capability, whether or not it subclasses ``HTTPError``.
    """

    def to_json_response(self) -> JsonResponse: ...


def reason_phrase(status: int) -> str:
    """Standard reason phrase for *status*, or ``""`` if unknown."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


@dataclass(frozen=True, slots=True)
class HTTPError(WarbleError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers and by the dispatcher for unmatched requests.
    Under the RESTful strategy it is converted to its canonical JSON
    response; under the other strategies it propagates to the host.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        return self.message

    @property
    def message(self) -> str:
        """The detail, falling back to the reason phrase."""
        return self.detail or reason_phrase(self.status)

    def to_json_response(self) -> JsonResponse:
        """Canonical JSON representation: ``{"status_code": N, "message": "..."}``."""
        from warble.http.response import JsonResponse

        response = JsonResponse.from_data(
            {"status_code": self.status, "message": self.message},
            status=self.status,
        )
        for name, value in self.headers:
            response = response.with_header(name, value)
        return response


class _StatusError(HTTPError):
    """HTTPError with a fixed status code, set on the subclass."""

    code: int = 500

    def __init__(self, detail: str = "", headers: tuple[tuple[str, str], ...] = ()) -> None:
        super().__init__(status=self.code, detail=detail, headers=headers)


class BadRequest(_StatusError):  # noqa: N818
    """400."""

    code = 400


class Unauthorized(_StatusError):  # noqa: N818
    """401: optionally carries a ``WWW-Authenticate`` challenge."""

    code = 401

    def __init__(self, detail: str = "", challenge: str = "") -> None:
        headers = (("WWW-Authenticate", challenge),) if challenge else ()
        super().__init__(detail=detail, headers=headers)


class Forbidden(_StatusError):  # noqa: N818
    """403."""

    code = 403


class NotFound(_StatusError):  # noqa: N818
    """404: no route matched the request path."""

    code = 404


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Carries the allowed methods in the order the matcher produced them
    and exposes them as an ``Allow`` header joined by ``", "``.
    """

    allowed: tuple[str, ...]

    def __init__(self, allowed: tuple[str, ...] | list[str], detail: str = "") -> None:
        allowed = tuple(allowed)
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", ", ".join(allowed)),),
        )
        # Frozen parent: bypass the generated __setattr__
        object.__setattr__(self, "allowed", allowed)


class NotAcceptable(_StatusError):  # noqa: N818
    """406."""

    code = 406


class Conflict(_StatusError):  # noqa: N818
    """409."""

    code = 409


class Gone(_StatusError):  # noqa: N818
    """410."""

    code = 410


class LengthRequired(_StatusError):  # noqa: N818
    """411."""

    code = 411


class PreconditionFailed(_StatusError):  # noqa: N818
    """412."""

    code = 412


class UnsupportedMediaType(_StatusError):  # noqa: N818
    """415."""

    code = 415


class UnprocessableEntity(_StatusError):  # noqa: N818
    """422."""

    code = 422


class PreconditionRequired(_StatusError):  # noqa: N818
    """428."""

    code = 428


class TooManyRequests(_StatusError):  # noqa: N818
    """429: optionally carries a ``Retry-After`` hint in seconds."""

    code = 429

    def __init__(self, detail: str = "", retry_after: int | None = None) -> None:
        headers = (("Retry-After", str(retry_after)),) if retry_after is not None else ()
        super().__init__(detail=detail, headers=headers)


class ServiceUnavailable(_StatusError):  # noqa: N818
    """503: optionally carries a ``Retry-After`` hint in seconds."""

    code = 503

    def __init__(self, detail: str = "", retry_after: int | None = None) -> None:
        headers = (("Retry-After", str(retry_after)),) if retry_after is not None else ()
        super().__init__(detail=detail, headers=headers)
