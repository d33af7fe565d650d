"""
Built-in route handlers.

    /         → pages.index          (text/html)
    /time     → pages.current_time   (application/json)
    /health   → HealthHandler.handle (application/json)
    /stats    → HealthHandler.stats  (application/json)
"""

from ..http.response import APPLICATION_JSON, TEXT_HTML
from ..http.routes import RouteTable
from .health import HealthHandler
from .pages import index, current_time


def register_default_routes(routes: RouteTable) -> HealthHandler:
    """
    Register the four built-in routes on ``routes``.

    Existing routes with the same paths are replaced.

    Returns:
        The HealthHandler backing /health and /stats.
    """
    health = HealthHandler()

    routes.register("/", index, TEXT_HTML)
    routes.register("/time", current_time, APPLICATION_JSON)
    routes.register("/health", health.handle, APPLICATION_JSON)
    routes.register("/stats", health.stats, APPLICATION_JSON)

    return health


__all__ = [
    "HealthHandler",
    "index",
    "current_time",
    "register_default_routes",
]
