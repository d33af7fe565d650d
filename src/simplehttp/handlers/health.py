"""
=============================================================================
HEALTH AND STATS HANDLERS
=============================================================================

Two probes for load balancers and humans:

    ┌─────────────────────┬───────────────────────────────────────────────┐
    │ Endpoint            │ Body                                          │
    ├─────────────────────┼───────────────────────────────────────────────┤
    │ /health             │ {"status": "healthy",                         │
    │                     │  "uptime": "1792412607512"}                   │
    │                     │ uptime is the current epoch time in ms, sent  │
    │                     │ as a string                                   │
    ├─────────────────────┼───────────────────────────────────────────────┤
    │ /stats              │ {"activeThreads": 12,                         │
    │                     │  "freeMemory": 8123456512}                    │
    │                     │ live interpreter threads, available bytes    │
    └─────────────────────┴───────────────────────────────────────────────┘

If the server can answer at all it reports "healthy"; there are no
dependency checks. Both bodies are rebuilt on every request.

activeThreads counts every live thread: the accept loop, all pool workers
(busy or idle) and anything else the process started.

=============================================================================
"""

import json
import threading
import time

import psutil


class HealthHandler:
    """
    Health and stats endpoints.

    Usage:
        health = HealthHandler()
        routes.register("/health", health.handle, "application/json")
        routes.register("/stats", health.stats, "application/json")
    """

    def handle(self, request_line: str) -> str:
        # The "uptime" field carries wall-clock millis, not elapsed time
        now_ms = int(time.time() * 1000)
        return json.dumps({"status": "healthy", "uptime": str(now_ms)})

    def stats(self, request_line: str) -> str:
        return json.dumps({
            "activeThreads": threading.active_count(),
            "freeMemory": psutil.virtual_memory().available,
        })
