"""
=============================================================================
SIMPLEHTTP CLI ENTRY POINT
=============================================================================

    # Defaults: 0.0.0.0:8080, ten workers
    python -m simplehttp

    # Custom port and pool size
    python -m simplehttp --port 3000 --workers 4

    # Drop slow clients after 30 seconds
    python -m simplehttp --timeout 30

Every option falls back to its SIMPLEHTTP_* environment variable, then to
the ServerConfig default. Besides the built-in routes, the CLI serves
/hello.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .server import SimpleHttpServer


def hello(request_line: str) -> str:
    return "<h1>Hello, World!</h1>"


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplehttp",
        description="Minimal multi-threaded HTTP server with exact-path routing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m simplehttp                      # 0.0.0.0:8080, 10 workers
  python -m simplehttp --port 3000          # Custom port
  python -m simplehttp --host 127.0.0.1     # Local connections only
  python -m simplehttp --timeout 30         # Socket timeout per client
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout,
        help="Per-connection socket timeout in seconds (default: none)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # WORKER POOL ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=defaults.workers,
        help=f"Number of worker threads (default: {defaults.workers})"
    )

    parser.add_argument(
        "--queue-size", "-q",
        type=int,
        default=defaults.queue_size,
        help="Hand-off queue capacity, 0 = unbounded (default: 0)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # BEHAVIOUR ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--no-default-routes",
        action="store_true",
        help="Serve only /hello, without /, /time, /health and /stats"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"SimpleHttpServer {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Parse arguments, build the server, serve until interrupted.

    Returns:
        Process exit code.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment setting: {e}", file=sys.stderr)
        return 1

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        workers=args.workers,
        queue_size=args.queue_size,
        log_level=args.log_level,
        default_routes=not args.no_default_routes,
    )

    try:
        server = SimpleHttpServer(config)
        server.add_route("/hello", hello)
        server.start()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


# =============================================================================
# ENTRY POINT
# =============================================================================
# python -m simplehttp

if __name__ == "__main__":
    sys.exit(main())
