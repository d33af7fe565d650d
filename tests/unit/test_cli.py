"""
Unit tests for the command-line entry point.
"""

import pytest

from simplehttp.__main__ import build_parser, hello, main
from simplehttp.config import ServerConfig


class TestParser:
    """Tests for argument parsing."""

    def test_defaults_come_from_config(self):
        args = build_parser(ServerConfig()).parse_args([])

        assert args.host == "0.0.0.0"
        assert args.port == 8080
        assert args.workers == 10
        assert args.queue_size == 0
        assert args.timeout is None
        assert args.log_level == "INFO"
        assert args.no_default_routes is False

    def test_env_backed_defaults(self):
        args = build_parser(ServerConfig(port=3000, workers=4)).parse_args([])

        assert args.port == 3000
        assert args.workers == 4

    def test_flags(self):
        args = build_parser(ServerConfig()).parse_args([
            "--host", "127.0.0.1",
            "-p", "9000",
            "-w", "2",
            "--queue-size", "50",
            "--timeout", "1.5",
            "--log-level", "debug",
            "--no-default-routes",
        ])

        assert args.host == "127.0.0.1"
        assert args.port == 9000
        assert args.workers == 2
        assert args.queue_size == 50
        assert args.timeout == 1.5
        assert args.log_level == "DEBUG"
        assert args.no_default_routes is True

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser(ServerConfig()).parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "SimpleHttpServer 1.0.0" in capsys.readouterr().out


class TestMain:
    """Tests for main() failure paths. Nothing here binds a socket."""

    def test_invalid_config_exits_1(self, capsys):
        assert main(["--workers", "0"]) == 1
        assert "workers must be >= 1" in capsys.readouterr().err

    def test_invalid_environment_exits_1(self, monkeypatch, capsys):
        monkeypatch.setenv("SIMPLEHTTP_PORT", "not-a-port")

        assert main([]) == 1
        assert "invalid environment setting" in capsys.readouterr().err


def test_hello_route():
    assert hello("GET /hello HTTP/1.1") == "<h1>Hello, World!</h1>"
