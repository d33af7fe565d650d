"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can put on a status line.

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase (HTTPStatus.phrase)
              └───────── Status code  (int value of the enum)

Only the codes the server or a route handler realistically produces are
listed. Handlers that need something else can still build an HTTPResponse
with any member here.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes with reason phrases.

    IntEnum so members compare equal to plain ints:

        HTTPStatus.NOT_FOUND == 404   # True
        f"{HTTPStatus.OK}"            # "200"
    """

    # 2xx Success
    OK = 200
    CREATED = 201
    NO_CONTENT = 204

    # 3xx Redirection
    MOVED_PERMANENTLY = 301
    FOUND = 302

    # 4xx Client errors
    BAD_REQUEST = 400                   # Request line could not be parsed
    FORBIDDEN = 403
    NOT_FOUND = 404                     # No route registered for the path
    METHOD_NOT_ALLOWED = 405
    URI_TOO_LONG = 414                  # Request line exceeds max_line_size

    # 5xx Server errors
    INTERNAL_SERVER_ERROR = 500         # Route handler failed
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503

    def __str__(self) -> str:
        return str(self.value)

    def __format__(self, format_spec: str) -> str:
        return format(self.value, format_spec)

    @property
    def phrase(self) -> str:
        """Reason phrase that follows the code on the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx codes."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.URI_TOO_LONG: "URI Too Long",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}
