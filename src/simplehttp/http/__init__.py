"""
=============================================================================
HTTP LAYER
=============================================================================

Protocol pieces that know nothing about sockets or threads:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST LINE (request.py)                                           │
    │   "GET /time HTTP/1.1" → RequestLine(method, path, version, raw)    │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ROUTE TABLE (routes.py)                                             │
    │   exact path → Route(handler, content_type), 404 route otherwise    │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE (response.py)                                              │
    │   HTTPResponse(status, content_type, body).to_bytes()               │
    ├─────────────────────────────────────────────────────────────────────┤
    │ STATUS CODES (status_codes.py)                                      │
    │   HTTPStatus.NOT_FOUND → 404, "Not Found"                           │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPParseError, RequestLine, parse_request_line
from .response import (
    HTTPResponse,
    format_response,
    ok,
    html,
    json_response,
    not_found,
    bad_request,
    internal_error,
    APPLICATION_JSON,
    TEXT_HTML,
    TEXT_PLAIN,
)
from .routes import Handler, Route, RouteTable, NOT_FOUND_ROUTE
from .status_codes import HTTPStatus

__all__ = [
    # Request line
    "HTTPParseError",
    "RequestLine",
    "parse_request_line",

    # Responses
    "HTTPResponse",
    "format_response",
    "ok",
    "html",
    "json_response",
    "not_found",
    "bad_request",
    "internal_error",
    "APPLICATION_JSON",
    "TEXT_HTML",
    "TEXT_PLAIN",

    # Routing
    "Handler",
    "Route",
    "RouteTable",
    "NOT_FOUND_ROUTE",

    # Status codes
    "HTTPStatus",
]
