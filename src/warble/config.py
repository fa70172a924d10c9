"""Dispatch configuration.

DispatchConfig is a frozen dataclass. The collection and dispatcher read
it once, when they are built.
"""

from dataclasses import dataclass

from warble.routing.route import Strategy


@dataclass(frozen=True, slots=True)
class DispatchConfig:
    """Dispatch configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DispatchConfig(strategy=Strategy.RESTFUL, debug=True)
    """

    # Strategy given to routes registered without one
    default_strategy: Strategy = Strategy.REQUEST_RESPONSE

    # Global override; when set, every dispatch uses it
    strategy: Strategy | None = None

    # Container ids resolved for handler arguments
    request_service: str = "warble.http.Request"
    response_service: str = "warble.http.Response"

    # JSON encoding
    json_ensure_ascii: bool = False

    # Host adapter: show exception detail on 500 pages
    debug: bool = False
