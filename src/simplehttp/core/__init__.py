"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking and concurrency plumbing. Nothing here knows about routes
or HTTP responses.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Binds host:port, listens, runs accept() on the calling thread    │
    │  • Wraps each accepted socket in a Connection                       │
    │  • Stops on shutdown(), SIGINT or SIGTERM                           │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ Hands off new connections
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • A fixed number of workers, ten by default                        │
    │  • Workers pull connections from one shared FIFO queue              │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ Worker serves the connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Buffered line reads, one response write, orderly close           │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer
from .thread_pool import ThreadPool, Task, Worker, WorkerState

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "ThreadPool",
    "Task",
    "Worker",
    "WorkerState",
]
