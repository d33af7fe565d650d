"""
Unit tests for the built-in route handlers.
"""

import json
import re
import time
from datetime import datetime

from simplehttp.handlers import HealthHandler, current_time, index, register_default_routes
from simplehttp.http.routes import NOT_FOUND_ROUTE, RouteTable


REQUEST = "GET / HTTP/1.1"


class TestIndex:
    """Tests for the welcome page."""

    def test_links_to_builtin_routes(self):
        page = index(REQUEST)

        for path in ["/time", "/health", "/stats"]:
            assert f"<a href='{path}'>{path}</a>" in page

    def test_shows_local_time(self):
        page = index(REQUEST)

        match = re.search(r"Current time: (\d{2}-\d{2}-\d{4} \d{2}:\d{2}:\d{2})", page)
        assert match
        shown = datetime.strptime(match.group(1), "%d-%m-%Y %H:%M:%S")
        assert abs((datetime.now() - shown).total_seconds()) < 5


class TestCurrentTime:
    """Tests for /time."""

    def test_iso_timestamp(self):
        data = json.loads(current_time("GET /time HTTP/1.1"))

        assert list(data) == ["time"]
        parsed = datetime.fromisoformat(data["time"])
        assert parsed.tzinfo is None
        assert abs((datetime.now() - parsed).total_seconds()) < 5


class TestHealthHandler:
    """Tests for /health and /stats."""

    def test_health(self):
        before = int(time.time() * 1000)
        data = json.loads(HealthHandler().handle("GET /health HTTP/1.1"))
        after = int(time.time() * 1000)

        assert data["status"] == "healthy"
        assert isinstance(data["uptime"], str)
        assert before <= int(data["uptime"]) <= after

    def test_stats(self):
        data = json.loads(HealthHandler().stats("GET /stats HTTP/1.1"))

        assert set(data) == {"activeThreads", "freeMemory"}
        assert data["activeThreads"] >= 1
        assert isinstance(data["freeMemory"], int)
        assert data["freeMemory"] > 0


class TestRegisterDefaultRoutes:
    """Tests for register_default_routes()."""

    def test_registers_four_routes(self):
        routes = RouteTable()
        register_default_routes(routes)

        assert routes.paths() == ["/", "/health", "/stats", "/time"]
        assert routes.resolve("/").content_type == "text/html"
        for path in ["/time", "/health", "/stats"]:
            assert routes.resolve(path).content_type == "application/json"

    def test_other_paths_not_found(self):
        routes = RouteTable()
        register_default_routes(routes)

        assert routes.resolve("/hello") is NOT_FOUND_ROUTE
