"""
=============================================================================
LISTENING SOCKET AND ACCEPT LOOP
=============================================================================

Owns the listening socket and runs the accept loop. It knows nothing about
HTTP: every accepted socket is wrapped in a Connection and passed to a
callback, which hands it to the worker pool.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a TCP socket
    2. bind()      Reserve host:port            ← failure is fatal
    3. listen()    Start queueing connections (backlog)
    4. accept()    BLOCKS until a client connects, returns a NEW socket
    5. close()     Release the listening socket

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once in start()
                    └───────────┬───────────┘
                                │ accept()
        ┌───────────────────────┼───────────────────────┐
        ▼                       ▼                       ▼
    Connection 1           Connection 2           Connection 3
    (worker pool)          (worker pool)          (worker pool)

=============================================================================
STOPPING A BLOCKED accept()
=============================================================================

accept() gives no way to say "stop waiting". shutdown() does two things:

    1. Clear the running flag.
    2. shutdown(SHUT_RDWR) the listening socket. On Linux this makes the
       blocked accept() fail at once.

The listening socket also carries a short timeout, so on platforms where
step 2 does not wake accept(), the loop notices the cleared flag within
ACCEPT_POLL_INTERVAL seconds.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..context import ServerContext
from .connection import Connection


logger = logging.getLogger(__name__)


ACCEPT_POLL_INTERVAL = 0.5


class SocketServer:
    """
    Low-level TCP accept loop.

    Usage:
        def on_connection(conn: Connection):
            pool.submit(handle, args=(conn,))

        server = SocketServer(context)
        server.start(on_connection)   # Blocks until shutdown()
    """

    def __init__(self, context: ServerContext):
        self.context = context
        self._socket: Optional[socket.socket] = None
        self._address: Optional[Tuple[str, int]] = None

        # Set once start() has either started listening or given up
        self._ready = threading.Event()
        self._listening = False

        self._previous_handlers: dict = {}

    @property
    def is_listening(self) -> bool:
        return self._listening

    @property
    def is_stopped(self) -> bool:
        """True once start() has finished or failed to bind."""
        return self._ready.is_set() and not self._listening

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Bound (host, port), or None before bind. Reports the real port for port 0."""
        return self._address

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the socket is listening or start() has failed.

        Returns:
            True if listening.
        """
        self._ready.wait(timeout)
        return self._listening

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Rebind immediately after a restart instead of waiting out TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(ACCEPT_POLL_INTERVAL)
        return sock

    def _setup_signals(self):
        """
        Stop on SIGINT / SIGTERM.

        signal.signal() only works on the main thread, so servers started
        from a background thread (tests, embedding) skip this.
        """
        if not self.context.config.install_signal_handlers:
            return
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._previous_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._previous_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._previous_handlers.items():
            signal.signal(sig, handler)
        self._previous_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept until shutdown() or an accept error.

        Args:
            connection_handler: Called on the accept thread with each new
                                Connection. Must not block for long.

        Raises:
            OSError: If the socket cannot be bound.
        """
        config = self.context.config
        self._socket = self._create_socket()

        try:
            self._socket.bind((config.host, config.port))
            self._socket.listen(config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {config.host}:{config.port}: {e}")
            self._cleanup()
            raise

        self._address = self._socket.getsockname()[:2]
        self.context.running.set()
        self._listening = True
        self._setup_signals()
        self._ready.set()

        logger.info(f"Server listening on {self._address[0]}:{self._address[1]}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        config = self.context.config

        while self.context.running.is_set():
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self.context.running.is_set():
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=config.buffer_size,
                timeout=config.timeout,
                max_line_size=config.max_line_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """
        Stop the accept loop. Idempotent, callable from any thread.
        """
        if not self.context.running.is_set():
            return

        logger.info("Shutting down socket server...")
        self.context.running.clear()

        sock = self._socket
        if sock is not None:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass  # Not supported for listening sockets on some platforms

    def _cleanup(self):
        self.context.running.clear()
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        was_listening = self._listening
        self._listening = False
        self._ready.set()

        if was_listening:
            logger.info("Socket server stopped")
