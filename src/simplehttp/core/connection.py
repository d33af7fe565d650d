"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket with line-oriented reading, a single
response write and a proper close.

=============================================================================
TCP IS A BYTE STREAM, NOT A LINE PROTOCOL
=============================================================================

    Client sends:    "GET /time HTTP/1.1\r\nHost: x\r\n\r\n"

    Server might receive:
        recv() → "GET /ti"
        recv() → "me HTTP/1.1\r\nHos"
        recv() → "t: x\r\n\r\n"

read_line() buffers recv() chunks until it sees a newline, returns the line
without its terminator and keeps whatever followed it for the next call.

=============================================================================
ONE REQUEST, ONE RESPONSE, THEN CLOSE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED
     │         │                                     ▲
     │         └── EOF before any data ──────────────┤
     └──────────── I/O error ────────────────────────┘

send_response() may be called once. close() always runs, via the context
manager, whatever happened before it.

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import Iterator, Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request."""
    NEW = "new"                # Accepted, nothing read yet
    READING = "reading"        # Reading request line / draining headers
    PROCESSING = "processing"  # Route handler running
    WRITING = "writing"        # Sending the response
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port).
        id: Short identifier used in log lines.
        state: Current ConnectionState.
        created_at: Accept time (time.time()).
        responses_sent: 0 or 1.
        bytes_sent: Bytes written by send_response().
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    responses_sent: int = 0
    bytes_sent: int = 0

    # Configuration (passed from ServerConfig)
    buffer_size: int = 8192
    timeout: Optional[float] = None
    max_line_size: int = 64 * 1024

    _buffer: bytes = field(default=b"", repr=False)
    _eof: bool = field(default=False, repr=False)

    def __post_init__(self):
        # None puts the socket in plain blocking mode
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else "-"

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> Optional[str]:
        """
        Read one line from the client.

        Accepts "\\r\\n" or a bare "\\n" as terminator. If the client closes
        mid-line, the partial line is returned; the next call returns None.

        Returns:
            The line without its terminator, or None if the stream ended
            before any byte of a new line arrived.

        Raises:
            ValueError: If the line exceeds max_line_size bytes.
            OSError: On socket errors, including socket.timeout.
        """
        self.state = ConnectionState.READING

        while b"\n" not in self._buffer:
            if len(self._buffer) > self.max_line_size:
                raise ValueError(f"Line too long: more than {self.max_line_size} bytes")
            if self._eof:
                break
            chunk = self._recv()
            if not chunk:
                self._eof = True
                break
            self._buffer += chunk

        newline = self._buffer.find(b"\n")
        if newline == -1:
            if not self._buffer:
                return None
            raw, self._buffer = self._buffer, b""
        else:
            raw, self._buffer = self._buffer[:newline], self._buffer[newline + 1:]

        if len(raw) > self.max_line_size:
            raise ValueError(f"Line too long: {len(raw)} bytes")

        return raw.rstrip(b"\r").decode("utf-8", errors="replace")

    def drain_headers(self) -> Iterator[str]:
        """
        Consume header lines up to the blank line or end of stream.

        Yields each discarded line so the caller can log it. Nothing is
        parsed.
        """
        while True:
            line = self.read_line()
            if not line:
                return
            yield line

    def _recv(self) -> bytes:
        """recv() that maps an abrupt client reset to end of stream."""
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Write the response bytes with sendall().

        Returns:
            True if every byte was handed to the kernel, False if the
            client went away.

        Raises:
            RuntimeError: If a response was already sent on this connection.
        """
        if self.responses_sent:
            raise RuntimeError(f"[{self.id}] Response already sent")

        self.state = ConnectionState.WRITING
        self.responses_sent += 1

        try:
            self.socket.sendall(data)
            self.bytes_sent += len(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR) sends FIN so the client sees end of response.
        2. Briefly drain anything the client still sends.
        3. close() releases the file descriptor.

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
