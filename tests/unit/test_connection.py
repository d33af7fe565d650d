"""
Unit tests for Connection, over a local socket pair.
"""

import socket

import pytest

from simplehttp.core.connection import Connection, ConnectionState


class TestReadLine:
    """Tests for Connection.read_line()."""

    def test_crlf_line(self, socket_pair, connection):
        _, client = socket_pair
        client.sendall(b"GET / HTTP/1.1\r\n")

        assert connection.read_line() == "GET / HTTP/1.1"
        assert connection.state == ConnectionState.READING

    def test_bare_lf_line(self, socket_pair, connection):
        _, client = socket_pair
        client.sendall(b"GET / HTTP/1.1\n")

        assert connection.read_line() == "GET / HTTP/1.1"

    def test_line_split_across_sends(self, socket_pair):
        """Test a line arriving in several recv() chunks."""
        server_side, client = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 1), buffer_size=4, timeout=5.0)
        client.sendall(b"GET /time HTTP/1.1\r\nHost: x\r\n")

        assert conn.read_line() == "GET /time HTTP/1.1"
        assert conn.read_line() == "Host: x"

    def test_several_lines_in_one_chunk(self, socket_pair, connection):
        _, client = socket_pair
        client.sendall(b"a\r\nb\r\n\r\n")

        assert connection.read_line() == "a"
        assert connection.read_line() == "b"
        assert connection.read_line() == ""

    def test_eof_before_data(self, socket_pair, connection):
        """Test end of stream with nothing read returns None."""
        _, client = socket_pair
        client.shutdown(socket.SHUT_WR)

        assert connection.read_line() is None

    def test_partial_line_at_eof(self, socket_pair, connection):
        """Test a line without terminator is returned, then None."""
        _, client = socket_pair
        client.sendall(b"GET /health")
        client.shutdown(socket.SHUT_WR)

        assert connection.read_line() == "GET /health"
        assert connection.read_line() is None

    def test_invalid_utf8_replaced(self, socket_pair, connection):
        _, client = socket_pair
        client.sendall(b"GET /\xff HTTP/1.1\r\n")

        assert connection.read_line() == "GET /� HTTP/1.1"

    def test_line_too_long(self, socket_pair):
        server_side, client = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 1), max_line_size=256, timeout=5.0)
        client.sendall(b"GET /" + b"a" * 1000 + b" HTTP/1.1\r\n")

        with pytest.raises(ValueError):
            conn.read_line()

    def test_timeout(self, socket_pair):
        """Test a silent client raises socket.timeout when a timeout is set."""
        server_side, _ = socket_pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 1), timeout=0.1)

        with pytest.raises(socket.timeout):
            conn.read_line()


class TestDrainHeaders:
    """Tests for Connection.drain_headers()."""

    def test_stops_at_blank_line(self, socket_pair, connection):
        _, client = socket_pair
        client.sendall(b"Host: x\r\nAccept: */*\r\n\r\nleftover\r\n")

        assert list(connection.drain_headers()) == ["Host: x", "Accept: */*"]
        assert connection.read_line() == "leftover"

    def test_stops_at_eof(self, socket_pair, connection):
        _, client = socket_pair
        client.sendall(b"Host: x\r\n")
        client.shutdown(socket.SHUT_WR)

        assert list(connection.drain_headers()) == ["Host: x"]

    def test_no_headers(self, socket_pair, connection):
        _, client = socket_pair
        client.sendall(b"\r\n")

        assert list(connection.drain_headers()) == []


class TestSendAndClose:
    """Tests for send_response() and close()."""

    def test_send_response(self, socket_pair, connection):
        _, client = socket_pair

        assert connection.send_response(b"hello") is True
        assert connection.responses_sent == 1
        assert connection.bytes_sent == 5
        assert client.recv(16) == b"hello"

    def test_only_one_response(self, connection):
        connection.send_response(b"first")

        with pytest.raises(RuntimeError):
            connection.send_response(b"second")

    def test_send_to_closed_peer(self, socket_pair, connection):
        """Test a vanished client makes send_response() return False."""
        _, client = socket_pair
        client.close()

        assert connection.send_response(b"x" * 1024 * 1024) is False

    def test_close_signals_eof(self, socket_pair, connection):
        _, client = socket_pair
        client.shutdown(socket.SHUT_WR)
        connection.send_response(b"bye")
        connection.close()

        assert client.recv(16) == b"bye"
        assert client.recv(16) == b""
        assert connection.closed

    def test_close_idempotent(self, socket_pair, connection):
        _, client = socket_pair
        client.shutdown(socket.SHUT_WR)

        connection.close()
        connection.close()

        assert connection.state == ConnectionState.CLOSED

    def test_context_manager_closes(self, socket_pair, connection):
        _, client = socket_pair
        client.shutdown(socket.SHUT_WR)

        with connection as conn:
            assert conn is connection

        assert connection.closed


class TestProperties:
    """Tests for Connection properties."""

    def test_client_ip(self, connection):
        assert connection.client_ip == "127.0.0.1"

    def test_client_ip_without_address(self, socket_pair):
        server_side, _ = socket_pair
        conn = Connection(socket=server_side, address=())

        assert conn.client_ip == "-"

    def test_ids_unique(self, socket_pair):
        server_side, _ = socket_pair
        a = Connection(socket=server_side, address=("127.0.0.1", 1))
        b = Connection(socket=server_side, address=("127.0.0.1", 2))

        assert a.id != b.id
        assert len(a.id) == 8
