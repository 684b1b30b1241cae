"""
=============================================================================
minihttp
=============================================================================

A small HTTP/1.1 server on raw sockets with a fixed set of routes:

    GET  /                   200, empty body
    GET  /echo/<text>        200, <text>
    GET  /user-agent         200, the User-Agent header
    GET  /files/<name>       200 with the file, or 404
    POST /files/<name>       201, request body saved as <name>

Responses are gzip-compressed when the client accepts it, and
connections stay open until the client sends "Connection: close".

    python -m minihttp --port 4221 --directory /tmp/files

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
