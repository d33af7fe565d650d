"""
=============================================================================
HTTP RESPONSE FORMATTER
=============================================================================

Turns (status, content type, body) into the exact bytes written to the
client socket.

=============================================================================
WIRE FORMAT
=============================================================================

Every response has the same fixed shape. There is no chunking, no
compression and no header other than these five:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 200 OK\r\n                    ← status line               │
    │  Content-Type: application/json\r\n                                 │
    │  Content-Length: 34\r\n                 ← bytes, not characters     │
    │  Server: SimpleHttpServer/1.0\r\n                                   │
    │  Connection: close\r\n                  ← one request per connection│
    │  \r\n                                   ← blank line                │
    │  {"time": "2026-10-19T10:15:00.123"}    ← body, verbatim            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONTENT-LENGTH IS A BYTE COUNT
=============================================================================

    body = "héllo"
    len(body)                  → 5   characters
    len(body.encode("utf-8"))  → 6   bytes   ← what goes on the wire

A client reads exactly Content-Length bytes after the blank line. Counting
characters truncates any body containing multi-byte text, so the body is
encoded first and measured afterwards.

=============================================================================
"""

import json
from dataclasses import dataclass
from typing import Any, Union

from .status_codes import HTTPStatus


DEFAULT_SERVER_NAME = "SimpleHttpServer/1.0"

TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"
APPLICATION_JSON = "application/json"

NOT_FOUND_BODY = "404 - Page not found"
BAD_REQUEST_BODY = "400 - Bad request"
INTERNAL_ERROR_BODY = "500 - Internal server error"


@dataclass
class HTTPResponse:
    """
    A response waiting to be written to a connection.

    Attributes:
        status: HTTP status code.
        content_type: Value of the Content-Type header.
        body: Response body. Strings are UTF-8 encoded on construction,
              so ``body`` is always bytes afterwards.
    """

    status: HTTPStatus = HTTPStatus.OK
    content_type: str = TEXT_PLAIN
    body: Union[str, bytes] = b""
    version: str = "HTTP/1.1"

    def __post_init__(self):
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        if not isinstance(self.status, HTTPStatus):
            self.status = HTTPStatus(self.status)

    @property
    def status_line(self) -> str:
        """
        Status line without the trailing CRLF.

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {self.status} {self.status.phrase}"

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def to_bytes(self, server_name: str = DEFAULT_SERVER_NAME) -> bytes:
        """
        Serialize the response for ``socket.sendall()``.

        Header order is fixed: Content-Type, Content-Length, Server,
        Connection.

        Args:
            server_name: Value of the Server header.

        Returns:
            Status line, headers, blank line and body as one bytes object.
        """
        lines = [
            self.status_line,
            f"Content-Type: {self.content_type}",
            f"Content-Length: {len(self.body)}",
            f"Server: {server_name}",
            "Connection: close",
            "",
        ]
        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


def format_response(
    status: HTTPStatus,
    content_type: str,
    body: Union[str, bytes],
    server_name: str = DEFAULT_SERVER_NAME,
) -> bytes:
    """
    Build the wire bytes for a response in one call.

    Equivalent to ``HTTPResponse(status, content_type, body).to_bytes()``.

    Example:
        >>> format_response(HTTPStatus.OK, "text/plain", "hi")[:17]
        b'HTTP/1.1 200 OK\\r\\n'
    """
    return HTTPResponse(status, content_type, body).to_bytes(server_name)


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================
#
#     return ok("<h1>Hi</h1>", "text/html")
#     return json_response({"status": "healthy"})
#     return not_found()
#
# =============================================================================

def ok(body: Union[str, bytes] = "", content_type: str = TEXT_HTML) -> HTTPResponse:
    """200 OK with the given body and content type."""
    return HTTPResponse(HTTPStatus.OK, content_type, body)


def html(body: str) -> HTTPResponse:
    """200 OK, text/html."""
    return HTTPResponse(HTTPStatus.OK, TEXT_HTML, body)


def json_response(data: Any, status: HTTPStatus = HTTPStatus.OK) -> HTTPResponse:
    """
    Serialize ``data`` as JSON.

    ensure_ascii=False keeps non-ASCII text readable; the body is still
    measured in bytes by to_bytes().
    """
    body = json.dumps(data, ensure_ascii=False)
    return HTTPResponse(status, APPLICATION_JSON, body)


def not_found() -> HTTPResponse:
    """404 Not Found, text/plain, ``404 - Page not found``."""
    return HTTPResponse(HTTPStatus.NOT_FOUND, TEXT_PLAIN, NOT_FOUND_BODY)


def bad_request(status: HTTPStatus = HTTPStatus.BAD_REQUEST) -> HTTPResponse:
    """
    Plain-text client error for a request line we could not use.

    The status can be narrowed (e.g. URI_TOO_LONG); the body stays
    ``400 - Bad request`` unless the status is something else, in which
    case the body names the actual code.
    """
    if status == HTTPStatus.BAD_REQUEST:
        body = BAD_REQUEST_BODY
    else:
        body = f"{status} - {status.phrase}"
    return HTTPResponse(status, TEXT_PLAIN, body)


def internal_error() -> HTTPResponse:
    """500 Internal Server Error, text/plain. Never exposes the cause."""
    return HTTPResponse(HTTPStatus.INTERNAL_SERVER_ERROR, TEXT_PLAIN, INTERNAL_ERROR_BODY)
