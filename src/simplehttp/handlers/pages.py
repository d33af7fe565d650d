"""
Welcome page and clock.

    GET /      → text/html welcome page with the local time and links
    GET /time  → {"time": "2026-10-19T14:03:27.512345"}

Both read the local wall clock on every request; nothing is cached.
"""

import json
from datetime import datetime


# dd-mm-YYYY HH:MM:SS, e.g. 19-10-2026 14:03:27
DISPLAY_TIME_FORMAT = "%d-%m-%Y %H:%M:%S"

INDEX_LINKS = (
    ("/time", "Get current time in JSON"),
    ("/health", "Server health check"),
    ("/stats", "Server statistics"),
)


def index(request_line: str) -> str:
    """Welcome page listing the built-in routes."""
    now = datetime.now().strftime(DISPLAY_TIME_FORMAT)
    links = "".join(
        f"<li><a href='{path}'>{path}</a> - {description}</li>"
        for path, description in INDEX_LINKS
    )
    return (
        "<h1>Hello World! Welcome to SimpleHttpServer</h1>"
        f"<p>Current time: {now}</p>"
        "<p>Try these routes:</p>"
        f"<ul>{links}</ul>"
    )


def current_time(request_line: str) -> str:
    """ISO-8601 local timestamp, no timezone offset."""
    return json.dumps({"time": datetime.now().isoformat()})
