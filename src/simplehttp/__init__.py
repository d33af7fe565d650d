"""
=============================================================================
SIMPLEHTTP - A MINIMAL CONCURRENT HTTP SERVER
=============================================================================

A small HTTP/1.1 server: one accept loop, a fixed pool of worker threads
and a table of exact-path routes. Each connection carries exactly one
request and one response, then closes.

    from simplehttp import SimpleHttpServer, ServerConfig

    server = SimpleHttpServer(ServerConfig(port=8080))
    server.add_route("/hello", lambda line: "<h1>Hello, World!</h1>")
    server.start()

Built-in routes: /, /time, /health, /stats. Everything else is a plain-text
404.

What it does NOT do: keep-alive, request bodies, query strings, methods,
TLS, static files, middleware. Headers are read and thrown away.

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import SimpleHttpServer, ServerState, create_server
from .http.request import HTTPParseError
from .http.response import HTTPResponse, format_response
from .http.routes import Route, RouteTable

__all__ = [
    "SimpleHttpServer",
    "ServerState",
    "ServerConfig",
    "create_server",
    "HTTPParseError",
    "HTTPResponse",
    "format_response",
    "Route",
    "RouteTable",
    "__version__",
]
