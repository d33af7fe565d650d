"""
pytest configuration and fixtures.
"""

import socket
import threading
from dataclasses import dataclass, field
from typing import Dict, Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simplehttp import SimpleHttpServer, ServerConfig
from simplehttp.core.connection import Connection


@dataclass
class WireResponse:
    """A response as read off the socket."""

    raw: bytes
    status_line: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def status(self) -> int:
        return int(self.status_line.split()[1])

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    @classmethod
    def parse(cls, raw: bytes) -> "WireResponse":
        head, _, body = raw.partition(b"\r\n\r\n")
        lines = head.decode("utf-8").split("\r\n")
        headers = {}
        for line in lines[1:]:
            name, _, value = line.partition(": ")
            headers[name] = value
        return cls(raw=raw, status_line=lines[0], headers=headers, body=body)


def recv_all(sock: socket.socket) -> bytes:
    """Read until the peer closes."""
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def send_raw(port: int, payload: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to 127.0.0.1:port and return everything sent back."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as sock:
        if payload:
            sock.sendall(payload)
        sock.shutdown(socket.SHUT_WR)
        return recv_all(sock)


def http_get(port: int, path: str) -> WireResponse:
    payload = f"GET {path} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode()
    return WireResponse.parse(send_raw(port, payload))


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        workers=10,
        timeout=5.0,
        log_level="WARNING",
        configure_logging=False,
        install_signal_handlers=False,
    )


@pytest.fixture
def socket_pair() -> Generator[tuple, None, None]:
    """(server_side, client_side) connected sockets."""
    server_side, client_side = socket.socketpair()
    yield server_side, client_side
    for sock in (server_side, client_side):
        try:
            sock.close()
        except OSError:
            pass


@pytest.fixture
def connection(socket_pair) -> Connection:
    """A Connection wrapping the server side of a socket pair."""
    server_side, _ = socket_pair
    return Connection(socket=server_side, address=("127.0.0.1", 54321), timeout=5.0)


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class

    def __init__(self, server: SimpleHttpServer):
        self.server = server
        self.error: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.port

    def _run(self):
        try:
            self.server.start()
        except BaseException as e:
            self.error = e

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError(f"Server failed to start: {self.error}")

    def stop(self, timeout: float = 5.0):
        """Stop the server and wait for start() to return."""
        self.server.stop()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    @property
    def finished(self) -> bool:
        return self._thread is not None and not self._thread.is_alive()

    def get(self, path: str) -> WireResponse:
        return http_get(self.port, path)

    def send(self, payload: bytes) -> bytes:
        return send_raw(self.port, payload)


@pytest.fixture
def make_server(config: ServerConfig):
    """Factory for started background servers; all are stopped at teardown."""
    started = []

    def factory(server: Optional[SimpleHttpServer] = None) -> TestServer:
        test_srv = TestServer(server or SimpleHttpServer(config))
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield factory

    for test_srv in started:
        test_srv.stop()


@pytest.fixture
def test_server(make_server) -> TestServer:
    """A running server with the built-in routes plus /hello."""
    server = SimpleHttpServer(ServerConfig(
        host="127.0.0.1",
        port=0,
        timeout=5.0,
        configure_logging=False,
        install_signal_handlers=False,
    ))
    server.add_route("/hello", lambda line: "<h1>Hello, World!</h1>")
    return make_server(server)
