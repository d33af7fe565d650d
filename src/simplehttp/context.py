"""
Server context: the state shared by the accept loop and the workers.

Everything a connection needs (config, route table, running flag) lives
on one object that is handed to each component explicitly. Nothing is
read from module globals or from the server instance itself.
"""

import threading
from dataclasses import dataclass, field

from .config import ServerConfig
from .http.routes import RouteTable


@dataclass
class ServerContext:
    """
    Attributes:
        config: Validated server configuration.
        routes: Route table. Read-only once the server is running.
        running: Set while the accept loop should keep accepting.
    """

    config: ServerConfig = field(default_factory=ServerConfig)
    routes: RouteTable = field(default_factory=RouteTable)
    running: threading.Event = field(default_factory=threading.Event)

    @property
    def is_running(self) -> bool:
        return self.running.is_set()
