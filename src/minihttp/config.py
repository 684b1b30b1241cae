"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the HTTP server.

The listen address, the socket read size and the directory behind /files/
have fixed defaults, so running the server with no configuration always
behaves the same way. Every one of them can still be injected
(tests bind to port 0 and use a temporary directory).

=============================================================================
DEFAULTS AT A GLANCE
=============================================================================

    ┌──────────────────────┬──────────────────────────────────────────────┐
    │  host / port         │  0.0.0.0:4221                                │
    │  buffer_size         │  1024 bytes per socket read                  │
    │  files_dir           │  /tmp/data/codecrafters.io/http-server-tester│
    │  encodings           │  ("gzip",)                                   │
    │  timeout             │  None (block until the client sends)         │
    └──────────────────────┴──────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .http.encoding import SUPPORTED_ENCODINGS


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 4221
DEFAULT_BUFFER_SIZE = 1024
DEFAULT_FILES_DIR = "/tmp/data/codecrafters.io/http-server-tester/"


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout, max_request_size

    CONTENT
    - files_dir, encodings, compression_level

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = DEFAULT_HOST
    """
    The IP address to bind to.
    - "0.0.0.0" - All network interfaces (default)
    - "127.0.0.1" - Localhost only (tests)
    """

    port: int = DEFAULT_PORT
    """
    The port number to listen on. 0 lets the OS pick a free port.
    """

    backlog: int = 128
    """
    Maximum number of queued connections waiting for accept().
    """

    buffer_size: int = DEFAULT_BUFFER_SIZE
    """
    Size of each socket read in bytes. Every recv() gets a fresh buffer
    of this size.
    """

    timeout: Optional[float] = None
    """
    Socket read timeout in seconds.
    None = block until the client sends something or hangs up.
    When set, a connection that stays silent this long is closed.
    """

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """
    Upper bound on a single buffered request (headers + body).
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    files_dir: str = DEFAULT_FILES_DIR
    """
    Directory backing the /files/<name> routes.
    """

    encodings: Tuple[str, ...] = SUPPORTED_ENCODINGS
    """
    Content encodings the server is willing to apply, in preference order.
    """

    compression_level: int = 6
    """
    gzip compression level (0-9). 6 is the usual speed/size balance.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by HTTPServer at construction time so a bad value fails
        the process immediately instead of on the first request.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_request_size < self.buffer_size:
            raise ValueError("max_request_size must be >= buffer_size")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not 0 <= self.compression_level <= 9:
            raise ValueError("compression_level must be between 0 and 9")

        unknown = [name for name in self.encodings if name not in SUPPORTED_ENCODINGS]
        if unknown:
            raise ValueError(f"Unsupported encodings: {', '.join(unknown)}")
