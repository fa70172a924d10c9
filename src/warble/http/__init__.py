"""HTTP value objects: Request, Response, JsonResponse, Headers."""

from warble.http.headers import Headers
from warble.http.request import Request
from warble.http.response import JsonResponse, Response

__all__ = ["Headers", "JsonResponse", "Request", "Response"]
