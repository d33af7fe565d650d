"""
=============================================================================
SIMPLE HTTP SERVER
=============================================================================

Ties the pieces together: a listening socket, a fixed pool of workers and
an exact-match route table.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    SIMPLEHTTP ARCHITECTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                      ┌──────────────────┐                           │
    │                      │ SimpleHttpServer │                           │
    │                      │  (Orchestrator)  │                           │
    │                      └────────┬─────────┘                           │
    │                               │                                      │
    │            ┌──────────────────┼──────────────────┐                  │
    │            ▼                  ▼                  ▼                  │
    │    ┌──────────────┐   ┌──────────────┐   ┌──────────────┐          │
    │    │ SocketServer │   │  ThreadPool  │   │  RouteTable  │          │
    │    │ (accept loop)│   │ (10 workers) │   │ (exact match)│          │
    │    └──────┬───────┘   └──────┬───────┘   └──────────────┘          │
    │           │ Connection       │                  ▲                   │
    │           └─────submit()────►│                  │ resolve()         │
    │                              ▼                  │                   │
    │                     ┌───────────────────┐       │                   │
    │                     │ ConnectionHandler │───────┘                   │
    │                     └───────────────────┘                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The accept loop only accepts and hands off. Reading, routing and writing
all happen on a worker, so one slow client ties up one worker and nothing
else.

=============================================================================
LIFECYCLE
=============================================================================

    CREATED ──start()──► LISTENING ──stop() / signal / accept error──► STOPPED
       │
       └──── bind failure (OSError re-raised) ─────────────────────────► STOPPED

A server instance runs once. Build a new one to serve again.

=============================================================================
"""

import dataclasses
import logging
import queue
import threading
from enum import Enum
from typing import Optional, Tuple

from .config import ServerConfig
from .context import ServerContext
from .core.connection import Connection
from .core.socket_server import SocketServer
from .core.thread_pool import ThreadPool
from .handler import ConnectionHandler
from .handlers import register_default_routes
from .http.response import TEXT_HTML
from .http.routes import Handler, Route, RouteTable


logger = logging.getLogger(__name__)


SUBMIT_POLL_INTERVAL = 0.5


class ServerState(Enum):
    CREATED = "created"
    LISTENING = "listening"
    STOPPED = "stopped"


class SimpleHttpServer:
    """
    Fixed-pool HTTP server with exact-path routing.

    =========================================================================
    USAGE
    =========================================================================

        server = SimpleHttpServer(ServerConfig(port=8080))

        server.add_route("/hello", lambda line: "<h1>Hello, World!</h1>")

        @server.route("/version", content_type="application/json")
        def version(request_line):
            return '{"version": "1.0"}'

        server.start()   # Blocks until Ctrl+C or server.stop()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None, register_defaults: Optional[bool] = None):
        """
        Args:
            config: Server configuration. Validated here.
            register_defaults: Register /, /time, /health and /stats.
                               None defers to config.default_routes.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self.context = ServerContext(config=self.config)

        self._thread_pool = ThreadPool(
            workers=self.config.workers,
            queue_size=self.config.queue_size,
        )
        self._socket_server = SocketServer(self.context)
        self._handler = ConnectionHandler(self.context)

        self._start_lock = threading.Lock()
        self._started = False

        if register_defaults is None:
            register_defaults = self.config.default_routes
        if register_defaults:
            register_default_routes(self.context.routes)

    # =========================================================================
    # ROUTES
    # =========================================================================

    @property
    def routes(self) -> RouteTable:
        return self.context.routes

    def add_route(self, path: str, handler: Handler, content_type: str = TEXT_HTML) -> Route:
        """
        Register ``handler`` for the exact path ``path``.

        Call before start(); the table is not locked.
        """
        return self.context.routes.register(path, handler, content_type)

    def route(self, path: str, content_type: str = TEXT_HTML):
        """Decorator form of add_route()."""
        return self.context.routes.route(path, content_type)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> ServerState:
        if self._socket_server.is_listening:
            return ServerState.LISTENING
        if self._socket_server.is_stopped:
            return ServerState.STOPPED
        return ServerState.CREATED

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Bound (host, port) once listening, else None."""
        return self._socket_server.address

    @property
    def port(self) -> Optional[int]:
        address = self.address
        return address[1] if address else None

    @property
    def pool_stats(self) -> dict:
        return self._thread_pool.stats

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the server is listening or has failed to start.

        Returns:
            True if listening when the wait ended.
        """
        return self._socket_server.wait_until_ready(timeout)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self):
        """
        Serve until stop(), SIGINT/SIGTERM or an accept error (blocking).

        Raises:
            OSError: If the address cannot be bound.
            RuntimeError: If this server was already started.
        """
        with self._start_lock:
            if self._started:
                raise RuntimeError("Server has already been started")
            self._started = True

        if self.config.configure_logging:
            self._setup_logging()

        self._thread_pool.start()

        logger.info(
            f"Starting {self.config.server_name} on {self.config.host}:{self.config.port} "
            f"with {self.config.workers} workers"
        )
        self._log_routes()

        try:
            self._socket_server.start(self._on_connection)
        finally:
            self._shutdown()

    def stop(self):
        """
        Stop accepting connections. Safe from any thread, idempotent.

        start() returns once the accept loop has noticed.
        """
        self._socket_server.shutdown()

    def _shutdown(self):
        logger.info("Shutting down server...")

        # Queued connections are still served by the workers
        self._thread_pool.shutdown(wait=self.config.shutdown_wait)

        logger.info("Server stopped")

    def _setup_logging(self):
        """Configure the root logger from config.log_level."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("simplehttp").setLevel(level)

    def _log_routes(self):
        paths = self.context.routes.paths()
        if not paths:
            logger.warning("No routes registered, every request will get 404")
            return
        logger.info(f"Routes: {', '.join(paths)}")

    # =========================================================================
    # CONNECTION HAND-OFF
    # =========================================================================

    def _on_connection(self, conn: Connection):
        """
        Called on the accept thread for each new connection.

        With a bounded queue the hand-off waits for a free slot, re-checking
        the running flag so stop() is not stuck behind a full queue.
        """
        while True:
            try:
                self._thread_pool.submit(
                    self._handler, args=(conn,), timeout=SUBMIT_POLL_INTERVAL
                )
                return
            except queue.Full:
                if self.context.is_running:
                    continue
                reason = "server stopping with a full queue"
            except RuntimeError as e:
                reason = str(e)

            logger.warning(f"[{conn.id}] Dropping connection: {reason}")
            conn.close()
            return


def create_server(config: Optional[ServerConfig] = None, **overrides) -> SimpleHttpServer:
    """
    Build a server from a copy of ``config`` with individual fields overridden.

    The caller's config is left untouched.

    Example:
        server = create_server(port=3000, workers=4)
        server.start()
    """
    base = config or ServerConfig()
    for name in overrides:
        if not hasattr(base, name):
            raise TypeError(f"Unknown config option: {name}")
    return SimpleHttpServer(dataclasses.replace(base, **overrides))
