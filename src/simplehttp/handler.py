"""
=============================================================================
CONNECTION HANDLER
=============================================================================

Runs on a worker thread, once per accepted connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ONE CONNECTION, ONE REQUEST                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. read_line()          "GET /time HTTP/1.1"                      │
    │      └── EOF first?       close, write nothing                      │
    │                                                                      │
    │   2. parse_request_line() → RequestLine(path="/time")              │
    │      └── malformed?       400 Bad Request                           │
    │      └── too long?        414 URI Too Long                          │
    │                                                                      │
    │   3. drain_headers()      read and discard up to the blank line     │
    │                                                                      │
    │   4. routes.resolve()     exact match, else the 404 route           │
    │                                                                      │
    │   5. route.handler(line)                                            │
    │      └── str              200 with the route's content type        │
    │      └── HTTPResponse     sent as returned                          │
    │      └── raises           500 Internal Server Error                 │
    │                                                                      │
    │   6. send_response() once, then close()                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The connection is closed in every case, including when step 5 blows up.
Socket errors end the connection with a warning. Nothing escapes to the
worker pool.

=============================================================================
ACCESS LOG
=============================================================================

Each answered request produces one line on the "simplehttp.access" logger:

    127.0.0.1 "GET /time HTTP/1.1" 200 39 0.4ms

Point that logger at its own handler to split access and error logs.

=============================================================================
"""

import logging
import time
from typing import Optional

from .context import ServerContext
from .core.connection import Connection, ConnectionState
from .http.request import HTTPParseError, RequestLine, parse_request_line
from .http.response import HTTPResponse, ok, bad_request, internal_error
from .http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("simplehttp.access")


class ConnectionHandler:
    """
    Callable that serves a single Connection.

    Usage:
        handler = ConnectionHandler(context)
        pool.submit(handler, args=(conn,))
    """

    def __init__(self, context: ServerContext):
        self.context = context

    def __call__(self, conn: Connection):
        with conn:
            try:
                self.handle(conn)
            except OSError as e:
                # Includes socket.timeout and client resets
                logger.warning(f"[{conn.id}] Connection error from {conn.client_ip}: {e}")

    def handle(self, conn: Connection):
        """Read, route, respond. The caller closes the connection."""
        started = time.perf_counter()

        try:
            line = conn.read_line()
        except ValueError as e:
            logger.warning(f"[{conn.id}] {e}")
            self._send(conn, bad_request(HTTPStatus.URI_TOO_LONG), "-", started)
            return

        if line is None:
            logger.debug(f"[{conn.id}] Client closed without sending a request")
            return

        try:
            request = parse_request_line(line)
        except HTTPParseError as e:
            logger.debug(f"[{conn.id}] {e}")
            self._send(conn, bad_request(e.status_code), line, started)
            return

        self._drain_headers(conn)

        conn.state = ConnectionState.PROCESSING
        response = self.dispatch(request)
        self._send(conn, response, line, started)

    def dispatch(self, request: RequestLine) -> HTTPResponse:
        """
        Run the route handler for ``request.path`` and normalize its result.

        Never raises: handler failures become a 500 response.
        """
        route = self.context.routes.resolve(request.path)

        try:
            result = route.handler(request.raw)
        except Exception as e:
            logger.exception(f"Handler for {request.path} failed: {e}")
            return internal_error()

        if isinstance(result, HTTPResponse):
            return result
        if isinstance(result, (str, bytes)):
            return ok(result, route.content_type)

        logger.error(
            f"Handler for {request.path} returned unsupported type "
            f"{type(result).__name__}"
        )
        return internal_error()

    def _drain_headers(self, conn: Connection):
        try:
            for header in conn.drain_headers():
                logger.debug(f"[{conn.id}] Header: {header}")
        except ValueError as e:
            # Oversized header line. close() discards whatever is left.
            logger.warning(f"[{conn.id}] Stopped reading headers: {e}")

    def _send(self, conn: Connection, response: HTTPResponse, line: Optional[str], started: float):
        data = response.to_bytes(self.context.config.server_name)

        if conn.send_response(data):
            elapsed_ms = (time.perf_counter() - started) * 1000
            access_logger.info(
                f'{conn.client_ip} "{line}" {response.status} '
                f"{len(response.body)} {elapsed_ms:.1f}ms"
            )
