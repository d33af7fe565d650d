"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every tunable of the server in one dataclass.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m simplehttp --port 3000                          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── SIMPLEHTTP_PORT=3000 python -m simplehttp                 │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The defaults reproduce the behaviour of the classic fixed-pool server:
port 8080, ten workers, an unbounded hand-off queue and no socket timeouts.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for SimpleHttpServer.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK
    - host, port, backlog, buffer_size, timeout, max_line_size

    WORKER POOL
    - workers, queue_size, shutdown_wait

    BEHAVIOUR
    - default_routes, install_signal_handlers, server_name

    LOGGING
    - log_level, configure_logging

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind. "0.0.0.0" listens on every interface."""

    port: int = 8080
    """Port to listen on. 0 lets the OS pick a free port (tests)."""

    backlog: int = 50
    """Kernel accept queue length passed to listen()."""

    buffer_size: int = 8192
    """Bytes requested per recv() call."""

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = block forever: a silent client holds its worker until it
    disconnects.
    """

    max_line_size: int = 64 * 1024
    """Longest request or header line accepted, in bytes."""

    # ─────────────────────────────────────────────────────────────────────
    # WORKER POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    workers: int = 10
    """Number of worker threads. Fixed for the life of the server."""

    queue_size: int = 0
    """
    Capacity of the queue between the accept loop and the workers.
    0 = unbounded. A positive value makes the accept loop wait for a free
    slot once the queue is full; connections are never rejected. A
    connection still waiting for a slot when stop() is called is closed
    unanswered.
    """

    shutdown_wait: bool = False
    """Join worker threads on shutdown instead of leaving them to finish."""

    # ─────────────────────────────────────────────────────────────────────
    # BEHAVIOUR
    # ─────────────────────────────────────────────────────────────────────

    default_routes: bool = True
    """Register /, /time, /health and /stats on construction."""

    install_signal_handlers: bool = True
    """Stop on SIGINT/SIGTERM. Only honoured on the main thread."""

    server_name: str = "SimpleHttpServer/1.0"
    """Value of the Server response header."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG also logs every drained header line."""

    configure_logging: bool = True
    """Call logging.basicConfig() when the server starts."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        SIMPLEHTTP_HOST        Bind address (default: 0.0.0.0)
        SIMPLEHTTP_PORT        Port (default: 8080)
        SIMPLEHTTP_WORKERS     Worker threads (default: 10)
        SIMPLEHTTP_QUEUE_SIZE  Hand-off queue capacity, 0 = unbounded
        SIMPLEHTTP_TIMEOUT     Socket timeout in seconds (default: none)
        SIMPLEHTTP_LOG_LEVEL   Logging level (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("SIMPLEHTTP_TIMEOUT")
        return cls(
            host=os.getenv("SIMPLEHTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("SIMPLEHTTP_PORT", "8080")),
            workers=int(os.getenv("SIMPLEHTTP_WORKERS", "10")),
            queue_size=int(os.getenv("SIMPLEHTTP_QUEUE_SIZE", "0")),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("SIMPLEHTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by the server constructor so a bad value fails at startup,
        not on the first request.

        Raises:
            ValueError: On the first invalid field.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.workers < 1:
            raise ValueError("workers must be >= 1")

        if self.queue_size < 0:
            raise ValueError("queue_size must be >= 0 (0 = unbounded)")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.max_line_size < 256:
            raise ValueError("max_line_size must be >= 256")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0 or None")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")
