"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    SocketServer ──accept──► Connection ──thread──► _process_connection
                                                        │
                              read_request ◄────────────┤
                              RequestParser.parse       │
                              RequestHandler.dispatch   │
                              send_response ────────────┘  (loop while
                                                            keep-alive)

=============================================================================
CONCURRENCY MODEL
=============================================================================

One daemon thread per accepted connection. There is no pool: a
keep-alive connection can sit idle for as long as the client likes, and
a bounded pool would let a handful of idle clients lock everybody else
out.

Inside a connection, requests are handled strictly one after another.
The response to request N is fully written before request N+1 is read,
so responses always come back in request order and the socket is never
closed under a handler that is still running.

=============================================================================
"""

import logging
import threading
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import FileStore, RequestHandler
from .http import (
    HTTPRequest, HTTPResponse, RequestParser, HTTPParseError,
    bad_request, internal_error,
)


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Minimal HTTP/1.1 server with a fixed set of routes.

        server = HTTPServer(ServerConfig(port=4221))
        server.run()  # blocks

    Runs until the accept loop fails or shutdown() is called from
    another thread.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()  # Fail fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()

        self.store = FileStore(self.config.files_dir)
        self.handler = RequestHandler(
            self.store,
            encodings=self.config.encodings,
            compression_level=self.config.compression_level,
        )

    @property
    def address(self):
        """The address the server is (or will be) bound to."""
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking).

        Args:
            host: Override config host.
            port: Override config port.

        Raises:
            OSError: If the listener cannot be bound or accept() fails.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        self.store.ensure_root()

        logger.info(f"Serving files from {self.store.root}")
        self._socket_server.start(self._handle_connection)

    def shutdown(self):
        """Stop accepting new connections. Open connections keep running."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Serve `conn` on its own daemon thread."""
        thread = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def _process_connection(self, conn: Connection):
        """
        Serve requests on one connection until it is closed.

        1. Read one request (EOF, read error or timeout ends the loop)
        2. Parse it (400 + close on failure)
        3. Dispatch to the route handler (500 + close if it raises)
        4. Write the response
        5. Close if the client sent "Connection: close", else repeat
        """
        with conn:
            while True:
                try:
                    raw_request = conn.read_request()
                except ValueError as e:
                    logger.warning(f"[{conn.id}] {e}")
                    break

                if raw_request is None:
                    break  # Client closed the connection

                try:
                    request = self._parser.parse(raw_request, conn.address)
                except HTTPParseError as e:
                    logger.warning(f"[{conn.id}] Bad request: {e}")
                    self._send_error(conn, bad_request())
                    break

                conn.mark_parsed()

                try:
                    response = self.handler.dispatch(request)
                except Exception as e:
                    logger.exception(f"[{conn.id}] Handler error: {e}")
                    response = internal_error()
                    self._log_request(conn, request, response)
                    self._send_error(conn, response)
                    break

                self._log_request(conn, request, response)

                if not conn.send_response(response.to_bytes()):
                    break

                conn.mark_dispatched()

                if request.should_close:
                    break

    def _log_request(self, conn: Connection, request: HTTPRequest, response: HTTPResponse):
        logger.info(
            f"[{conn.id}] {request.method} {request.target} -> {response.status.value}"
        )

    def _send_error(self, conn: Connection, response: HTTPResponse):
        """
        Send an error response for failures outside normal dispatch.

        Error responses always carry "Connection: close"; the caller
        closes the connection afterwards.
        """
        conn.send_response(response.to_bytes())
