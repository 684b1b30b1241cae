"""
=============================================================================
ROUTE HANDLERS
=============================================================================

The server has a fixed set of routes, selected by the first path segment
of the request target:

    ┌──────────────┬──────────┬─────────────────────────────────────────┐
    │ Primary      │ Method   │ Response                                │
    ├──────────────┼──────────┼─────────────────────────────────────────┤
    │ ""           │ any      │ 200, empty body                         │
    │ echo         │ any      │ 200, text/plain, rest of the path       │
    │ user-agent   │ any      │ 200, text/plain, User-Agent header      │
    │ files        │ GET      │ 200, application/octet-stream, or 404   │
    │ files        │ POST     │ 201, body written to the file store     │
    │ files        │ other    │ 404                                     │
    │ anything else│ any      │ 404                                     │
    └──────────────┴──────────┴─────────────────────────────────────────┘

Every 200 with a body goes through content negotiation, and every
response echoes "Connection: close" when the client sent it.

=============================================================================
"""

import logging
from typing import Callable, Dict, Iterable

from ..http.encoding import SUPPORTED_ENCODINGS, negotiate_encoding
from ..http.path import RequestPath
from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse, TEXT_PLAIN, OCTET_STREAM,
    ok, created, not_found,
)
from .files import FileStore, FileAccessError


logger = logging.getLogger(__name__)


class RequestHandler:
    """
    Dispatches a parsed request to the matching route.

        handler = RequestHandler(FileStore("/tmp/data"))
        response = handler.dispatch(request)

    Args:
        store: Backing store for /files.
        encodings: Content encodings the server may apply.
        compression_level: Level handed to the encoder.
    """

    def __init__(
        self,
        store: FileStore,
        encodings: Iterable[str] = SUPPORTED_ENCODINGS,
        compression_level: int = 6,
    ):
        self.store = store
        self.encodings = tuple(encodings)
        self.compression_level = compression_level

        self._routes: Dict[str, Callable[[HTTPRequest, RequestPath], HTTPResponse]] = {
            "": self._root,
            "echo": self._echo,
            "user-agent": self._user_agent,
            "files": self._files,
        }

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        path = RequestPath.parse(request.target)
        route = self._routes.get(path.primary)
        if route is None:
            return not_found(close=request.should_close)
        return route(request, path)

    def _ok(self, request: HTTPRequest, body, content_type: str = "") -> HTTPResponse:
        """200 response with the encoding negotiated from the request."""
        return ok(
            body,
            content_type,
            encoding=negotiate_encoding(request.accept_encoding, self.encodings),
            compression_level=self.compression_level,
            close=request.should_close,
        )

    # =========================================================================
    # ROUTES
    # =========================================================================

    def _root(self, request: HTTPRequest, path: RequestPath) -> HTTPResponse:
        return self._ok(request, b"")

    def _echo(self, request: HTTPRequest, path: RequestPath) -> HTTPResponse:
        return self._ok(request, path.secondary, TEXT_PLAIN)

    def _user_agent(self, request: HTTPRequest, path: RequestPath) -> HTTPResponse:
        return self._ok(request, request.user_agent, TEXT_PLAIN)

    def _files(self, request: HTTPRequest, path: RequestPath) -> HTTPResponse:
        if request.method == "GET":
            return self._read_file(request, path.secondary)
        if request.method == "POST":
            return self._write_file(request, path.secondary)
        return not_found(close=request.should_close)

    def _read_file(self, request: HTTPRequest, name: str) -> HTTPResponse:
        try:
            content = self.store.read(name)
        except FileAccessError:
            return not_found(close=request.should_close)
        except OSError as e:
            logger.warning(f"Cannot read file {name!r}: {e}")
            return not_found(close=request.should_close)

        return self._ok(request, content, OCTET_STREAM)

    def _write_file(self, request: HTTPRequest, name: str) -> HTTPResponse:
        try:
            self.store.write(name, request.body[:request.content_length])
        except FileAccessError:
            return not_found(close=request.should_close)
        except OSError as e:
            # The upload is acknowledged even if it could not be stored
            logger.error(f"Cannot write file {name!r}: {e}")

        return created(close=request.should_close)
