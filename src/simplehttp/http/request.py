"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

The server only ever looks at the first line of a request:

    GET /time HTTP/1.1\r\n
    └─┘ └───┘ └──────┘
    Method Path Version

Headers after it are drained and discarded, and bodies are never read.
Method and version are kept for logging only; routing uses the path alone.

A line is usable when it has at least two whitespace-separated tokens.
Anything shorter ("GET", "", "   ") raises HTTPParseError, which the
connection handler turns into a 400 response.

=============================================================================
"""

from dataclasses import dataclass

from .status_codes import HTTPStatus


class HTTPParseError(Exception):
    """
    Raised when the request line cannot be used for routing.

    Attributes:
        status_code: Status to answer with (400 by default).
    """

    def __init__(self, message: str, status_code: HTTPStatus = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class RequestLine:
    """
    A parsed request line.

    Attributes:
        method: First token, e.g. "GET". Not validated.
        path: Second token, used verbatim as the route key.
        version: Third token if present, else "".
        raw: The line as received, without the line terminator.
    """

    method: str
    path: str
    version: str
    raw: str


def parse_request_line(line: str) -> RequestLine:
    """
    Split a request line into method, path and version.

    Args:
        line: The first request line with CRLF already stripped.

    Returns:
        RequestLine

    Raises:
        HTTPParseError: If fewer than two tokens are present.
    """
    parts = line.split()
    if len(parts) < 2:
        raise HTTPParseError(f"Malformed request line: {line!r}")

    method, path = parts[0], parts[1]
    version = parts[2] if len(parts) > 2 else ""
    return RequestLine(method=method, path=path, version=version, raw=line)
