"""
=============================================================================
ROUTE TABLE
=============================================================================

Maps exact path strings to handler functions.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         ROUTE TABLE                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "/"        → index        (text/html)                             │
    │   "/time"    → current_time (application/json)                     │
    │   "/health"  → health       (application/json)                     │
    │   "/stats"   → stats        (application/json)                     │
    │                                                                      │
    │   anything else → NOT_FOUND_ROUTE (text/plain, 404)                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Matching is a single dict lookup. There are no parameters, wildcards,
prefixes or method filters: "/time" and "/time/" are different paths, and
"/time?x=1" is not "/time".

=============================================================================
HANDLERS
=============================================================================

A handler receives the raw request line and returns either:

    str           → body of a 200 OK response with the route's content type
    HTTPResponse  → sent exactly as returned (any status)

    def current_time(request_line: str) -> str:
        return json.dumps({"time": datetime.now().isoformat()})

    table.register("/time", current_time, "application/json")

=============================================================================
THREAD SAFETY
=============================================================================

The table is read by every worker thread and is not locked. Register all
routes before the server starts; registering while requests are in flight
is unsupported.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Union

from .response import HTTPResponse, TEXT_HTML, TEXT_PLAIN, not_found


logger = logging.getLogger(__name__)


Handler = Callable[[str], Union[str, HTTPResponse]]


@dataclass(frozen=True)
class Route:
    """
    A path bound to a handler.

    Attributes:
        path: Exact path the route answers.
        handler: Called with the raw request line.
        content_type: Content-Type used when the handler returns a str.
    """

    path: str
    handler: Handler
    content_type: str = TEXT_HTML


def _not_found_handler(request_line: str) -> HTTPResponse:
    return not_found()


# Returned by resolve() for every unregistered path.
NOT_FOUND_ROUTE = Route(path="*", handler=_not_found_handler, content_type=TEXT_PLAIN)


class RouteTable:
    """
    Exact-match route registry.

    Usage:
        routes = RouteTable()
        routes.register("/hello", lambda line: "<h1>Hello, World!</h1>")

        @routes.route("/time", content_type="application/json")
        def current_time(request_line):
            ...

        routes.resolve("/hello").handler("GET /hello HTTP/1.1")
        routes.resolve("/missing") is NOT_FOUND_ROUTE   # True
    """

    def __init__(self):
        self._routes: Dict[str, Route] = {}

    def register(self, path: str, handler: Handler, content_type: str = TEXT_HTML) -> Route:
        """
        Register ``handler`` for ``path``, replacing any existing route.

        Args:
            path: Exact path; must start with "/".
            handler: Callable taking the raw request line.
            content_type: Content-Type for string results.

        Returns:
            The new Route.

        Raises:
            ValueError: If path is empty or does not start with "/".
            TypeError: If handler is not callable.
        """
        if not path or not path.startswith("/"):
            raise ValueError(f"Route path must start with '/': {path!r}")
        if not callable(handler):
            raise TypeError(f"Handler for {path} is not callable: {handler!r}")

        if path in self._routes:
            logger.debug(f"Replacing route {path}")

        route = Route(path=path, handler=handler, content_type=content_type)
        self._routes[path] = route
        return route

    def route(self, path: str, content_type: str = TEXT_HTML) -> Callable[[Handler], Handler]:
        """
        Decorator form of register().

        The decorated function is returned unchanged.
        """
        def decorator(handler: Handler) -> Handler:
            self.register(path, handler, content_type)
            return handler
        return decorator

    def unregister(self, path: str) -> bool:
        """Remove the route for ``path``. Returns True if one existed."""
        return self._routes.pop(path, None) is not None

    def resolve(self, path: str) -> Route:
        """
        Look up the route for ``path``.

        Never fails: unknown paths get NOT_FOUND_ROUTE.
        """
        return self._routes.get(path, NOT_FOUND_ROUTE)

    def paths(self) -> List[str]:
        """Registered paths, sorted."""
        return sorted(self._routes)

    def __contains__(self, path: object) -> bool:
        return path in self._routes

    def __len__(self) -> int:
        return len(self._routes)
