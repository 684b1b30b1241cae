"""
=============================================================================
SOCKET SERVER
=============================================================================

The TCP acceptor: owns the listening socket and turns every accepted
client socket into a Connection for the HTTP layer.

    socket() ──► setsockopt() ──► bind() ──► listen() ──► accept() loop
                                                              │
                                         Connection(#n) ◄─────┘
                                              │
                                   connection_handler(conn)

=============================================================================
SOCKET OPTIONS
=============================================================================

    SO_REUSEADDR   restart without waiting out TIME_WAIT
    SO_REUSEPORT   where the platform has it
    TCP_NODELAY    small responses go out immediately (no Nagle delay)

accept() runs with a 1 second timeout so the loop can notice shutdown().

=============================================================================
"""

import socket
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


ACCEPT_POLL_INTERVAL = 1.0


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()

    Bind and accept failures are logged and re-raised; the caller decides
    what that means for the process.
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._connection_count = 0

        # Set once the socket is listening; tests wait on it
        self._ready_event = threading.Event()

    @property
    def connection_count(self) -> int:
        """Number of connections accepted so far."""
        return self._connection_count

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (host, port).

        Reports the real port after binding, which matters when the
        configured port is 0.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
        except (AttributeError, OSError):
            pass  # Not available on this platform

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        sock.settimeout(ACCEPT_POLL_INTERVAL)
        return sock

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept connections until shutdown().

        Args:
            connection_handler: Called with every accepted Connection. It
                                must return quickly (the HTTP server hands
                                the connection to a new thread).

        Raises:
            OSError: If binding, listening or accepting fails.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
            self._socket.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._cleanup()
            raise

        self._running = True
        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Poll the running flag
            except OSError as e:
                if not self._running:
                    break  # Socket closed by shutdown()
                logger.error(f"Accept error: {e}")
                raise

            self._connection_count += 1
            conn = Connection(
                socket=client_socket,
                address=client_address,
                id=self._connection_count,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                max_request_size=self.config.max_request_size,
            )

            logger.info(
                f"[{conn.id}] Accepted connection from {conn.client_ip}:{conn.client_port}"
            )

            connection_handler(conn)

    def shutdown(self):
        """
        Stop the accept loop.

        Returns immediately; the loop exits within ACCEPT_POLL_INTERVAL.
        Connections already being served are left alone.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. False on timeout."""
        return self._ready_event.wait(timeout)

    def _cleanup(self):
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None
        self._ready_event.clear()
        logger.info("Socket server stopped")
