"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds the exact bytes this server puts on the wire.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 200 OK\r\n                   ← status line (always)       │
    │  Content-Encoding: gzip\r\n            ← only if an encoding chosen │
    │  Content-Type: text/plain\r\n          ← only if a type is given    │
    │  Content-Length: 23\r\n                ← only if the body is not    │
    │                                          empty (after encoding)     │
    │  Connection: close\r\n                 ← only if the client asked   │
    │  \r\n                                  ← separator (always)         │
    │  <body bytes>                                                       │
    └─────────────────────────────────────────────────────────────────────┘

Header order is fixed and nothing is added implicitly (no Date, no
Server). A bare root request therefore gets exactly:

    HTTP/1.1 200 OK\r\n\r\n

=============================================================================
BUILDER PATTERN
=============================================================================

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .encoding("gzip")
        .content_type("text/plain")
        .body("hello")
        .close_connection()
        .build())

build() is where the body is encoded and Content-Length is computed, so
the declared length always matches the bytes that are sent.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .encoding import encode_body
from .status_codes import HTTPStatus


CONTENT_ENCODING = "Content-Encoding"
CONTENT_TYPE = "Content-Type"
CONTENT_LENGTH = "Content-Length"
CONNECTION = "Connection"

TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Headers are emitted in insertion order. Use ResponseBuilder to get
    the canonical ordering and a correct Content-Length.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {self.status.value} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self.headers[name] = value
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

            HTTP/1.1 200 OK\r\n
            Content-Type: text/plain\r\n
            Content-Length: 5\r\n
            \r\n
            hello
        """
        lines = [self.status_line]

        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    Each method returns `self`; build() produces the HTTPResponse with
    headers in the order Content-Encoding, Content-Type, Content-Length,
    Connection, followed by anything added through header().
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._encoding = ""
        self._compression_level = 6
        self._content_type = ""
        self._body: bytes = b""
        self._close = False
        self._extra_headers: Dict[str, str] = {}

    # =========================================================================
    # STATUS / HEADERS
    # =========================================================================

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def encoding(self, scheme: str, level: int = 6) -> "ResponseBuilder":
        """
        Encode the body with `scheme` at build time.

        An empty scheme means "send the body as is".
        """
        self._encoding = scheme
        self._compression_level = level
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set Content-Type. An empty string omits the header."""
        self._content_type = content_type
        return self

    def close_connection(self, close: bool = True) -> "ResponseBuilder":
        """Add "Connection: close" (tell the client we hang up after this)."""
        self._close = close
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add an extra header, emitted after the standard ones."""
        self._extra_headers[name] = value
        return self

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the response body (strings are UTF-8 encoded)."""
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self) -> HTTPResponse:
        """
        Build the HTTPResponse.

        The body is encoded first; Content-Length is the length of the
        bytes that will actually be sent.
        """
        body = self._body
        headers: Dict[str, str] = {}

        if self._encoding:
            headers[CONTENT_ENCODING] = self._encoding
            body = encode_body(body, self._encoding, self._compression_level)

        if self._content_type:
            headers[CONTENT_TYPE] = self._content_type

        if body:
            headers[CONTENT_LENGTH] = str(len(body))

        if self._close:
            headers[CONNECTION] = "close"

        headers.update(self._extra_headers)

        return HTTPResponse(status=self._status, headers=headers, body=body)

    def to_bytes(self) -> bytes:
        """Build and serialize in one step."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses the handlers produce:
#
#     return ok("hello", TEXT_PLAIN, encoding="gzip")
#     return created(close=request.should_close)
#     return not_found(close=request.should_close)
#
# =============================================================================

def ok(
    body: Union[str, bytes] = b"",
    content_type: str = "",
    encoding: str = "",
    compression_level: int = 6,
    close: bool = False,
) -> HTTPResponse:
    """
    Create a 200 OK response.

    Args:
        body: Response body (str is UTF-8 encoded).
        content_type: Content-Type, or "" to omit the header.
        encoding: Negotiated content encoding, or "" for none.
        compression_level: Level passed to the encoder.
        close: Add "Connection: close".
    """
    return (ResponseBuilder()
        .status(HTTPStatus.OK)
        .encoding(encoding, compression_level)
        .content_type(content_type)
        .body(body)
        .close_connection(close)
        .build())


def created(close: bool = False) -> HTTPResponse:
    """
    Create a 201 Created response.

    No headers other than the optional "Connection: close", no body.
    """
    return ResponseBuilder().status(HTTPStatus.CREATED).close_connection(close).build()


def not_found(close: bool = False) -> HTTPResponse:
    """
    Create a 404 Not Found response.

    Status line, optional "Connection: close", separator. No body.
    """
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).close_connection(close).build()


def bad_request() -> HTTPResponse:
    """400 Bad Request; the connection is always closed afterwards."""
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).close_connection().build()


def internal_error() -> HTTPResponse:
    """500 Internal Server Error; the connection is always closed afterwards."""
    return (ResponseBuilder()
        .status(HTTPStatus.INTERNAL_SERVER_ERROR)
        .close_connection()
        .build())
