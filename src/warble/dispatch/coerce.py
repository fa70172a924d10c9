"""Response coercion: turns a handler's return value into a response.

One function per strategy, each dispatching on the value's type. Each
raises ``ConfigurationError`` with a fixed message when the value can't
be used.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from warble.errors import ConfigurationError
from warble.http.response import JsonResponse, Response

REQUEST_RESPONSE_MESSAGE = (
    "When using the Request -> Response Strategy your controller must return "
    "an instance of a Response-shaped value"
)
RESTFUL_MESSAGE = (
    "Your controller action must return a valid response for the Restful Strategy. "
    "Acceptable responses are of type: [Array], [ArrayObject] and [JsonResponse]"
)
URI_MESSAGE = "Unable to build Response from controller return value"


def coerce_request_response(value: Any) -> Response:
    """Pass a ``Response`` through; reject everything else."""
    if isinstance(value, Response):
        return value
    raise ConfigurationError(REQUEST_RESPONSE_MESSAGE)


def _is_array_like(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def coerce_restful(value: Any, *, ensure_ascii: bool = False) -> JsonResponse:
    """Pass a ``JsonResponse`` through; serialize mappings and sequences.

    Mappings become JSON objects and sequences become JSON arrays, with
    status 200.
    """
    if isinstance(value, JsonResponse):
        return value
    if not _is_array_like(value):
        raise ConfigurationError(RESTFUL_MESSAGE)

    data = dict(value) if isinstance(value, Mapping) else list(value)
    try:
        return JsonResponse.from_data(data, ensure_ascii=ensure_ascii)
    except (TypeError, ValueError) as exc:
        msg = f"Controller return value is not JSON-serializable: {exc}"
        raise ConfigurationError(msg) from exc


def coerce_uri(value: Any) -> Response:
    """Pass a ``Response`` through; otherwise use the value as the body."""
    if isinstance(value, Response):
        return value
    try:
        return Response.from_value(value)
    except Exception as exc:
        raise ConfigurationError(URI_MESSAGE) from exc
