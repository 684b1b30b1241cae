"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one HTTP/1.1 request into an HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  POST /files/report.txt HTTP/1.1\r\n        ← request line          │
    │  Host: localhost:4221\r\n                   ← header lines          │
    │  Content-Length: 5\r\n                                              │
    │  \r\n                                       ← CRLF CRLF terminator  │
    │  hello                                      ← body                  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
A LENIENT PARSER
=============================================================================

This parser deliberately does very little validation:

1. The target is kept exactly as received: no URL decoding, no query
   string splitting. "/echo/a%20b" echoes "a%20b".

2. Header lines are split at the first ": " (colon + space). Lines
   without it are skipped. Names are lowercased, values kept verbatim.
   A repeated header overwrites the earlier one.

3. The body is everything after the first CRLF CRLF. It is NOT cut to
   Content-Length here; handlers that need an exact body (file upload)
   truncate it themselves.

The only hard failures are a missing header terminator and a request
line that is neither "METHOD TARGET VERSION" nor "METHOD VERSION".

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict


CRLF = "\r\n"
HEADER_TERMINATOR = b"\r\n\r\n"
HEADER_SEPARATOR = ": "


class HTTPParseError(Exception):
    """
    Raised when HTTP request parsing fails.

    Carries the HTTP status code to answer with (400 Bad Request for
    everything this parser rejects).
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def parse_header_lines(lines: list[str]) -> Dict[str, str]:
    """
    Parse "Name: value" lines into a dict keyed by lowercase name.

    Empty lines and lines without ": " are ignored. When a name
    repeats, the last value wins.

    The connection reader uses this too, so the body length it waits
    for is the one the parsed request reports.
    """
    headers: Dict[str, str] = {}

    for line in lines:
        name, separator, value = line.partition(HEADER_SEPARATOR)
        if not separator:
            continue  # Skip malformed headers (lenient parsing)
        headers[name.lower()] = value

    return headers


def content_length_of(headers: Dict[str, str]) -> int:
    """Content-Length from parsed headers; missing, negative or invalid is 0."""
    try:
        return max(int(headers.get("content-length", 0)), 0)
    except ValueError:
        return 0


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         Request method token (GET, POST, ...)

        target:         Raw request target, e.g. "/echo/hello".
                        "" when the request line had only two tokens.

        version:        Protocol token ("HTTP/1.1"). Parsed, then unused.

        headers:        Lowercase header name → raw value
                        {"user-agent": "curl/8.0", ...}

        body:           Bytes after the header terminator

        client_address: (ip, port) of the peer, for logging

        raw:            The original request bytes

    =========================================================================
    """

    method: str
    target: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    client_address: tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def content_length(self) -> int:
        """
        Content-Length header as an integer.

        Returns 0 if the header is missing, negative or not a number.
        """
        return content_length_of(self.headers)

    @property
    def user_agent(self) -> str:
        """User-Agent header value ("" if absent)."""
        return self.headers.get("user-agent", "")

    @property
    def accept_encoding(self) -> str:
        """Accept-Encoding header value ("" if absent)."""
        return self.headers.get("accept-encoding", "")

    @property
    def should_close(self) -> bool:
        """
        Whether the connection must be closed after this request.

        Keep-alive is the default; only an explicit "Connection: close"
        ends the connection. HTTP/1.0 is not treated differently.
        """
        return self.headers.get("connection", "").lower() == "close"

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value (case-insensitive lookup).

        Example:
            request.get_header("User-Agent")  # same as "user-agent"
        """
        return self.headers.get(name.lower(), default)


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

        Raw bytes
            │
            ├──► split at first CRLF CRLF ──► body (bytes)
            │
            └──► head (text)
                    │
                    ├──► line 0  ──► method, target, version
                    └──► lines 1+ ──► headers
    """

    def __init__(self, encoding: str = "utf-8"):
        """
        Args:
            encoding: Codec used to decode the request line and headers.
                      Undecodable bytes are replaced, never fatal.
        """
        self.encoding = encoding

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data into an HTTPRequest object.

        Args:
            data: Raw request bytes (headers, terminator, body).
            client_address: Client's (ip, port) tuple.

        Returns:
            Parsed HTTPRequest.

        Raises:
            HTTPParseError: No header terminator, or a request line with
                            the wrong number of tokens.
        """
        header_end = data.find(HEADER_TERMINATOR)
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        head = data[:header_end].decode(self.encoding, errors="replace")
        body = data[header_end + len(HEADER_TERMINATOR):]

        lines = head.split(CRLF)
        method, target, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        return HTTPRequest(
            method=method,
            target=target,
            version=version,
            headers=headers,
            body=body,
            client_address=client_address,
            raw=data,
        )

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        """
        Split the request line on single spaces.

            "GET /echo/hi HTTP/1.1"  → ("GET", "/echo/hi", "HTTP/1.1")
            "GET HTTP/1.1"           → ("GET", "", "HTTP/1.1")
        """
        parts = line.split(" ")

        if len(parts) == 3:
            method, target, version = parts
        elif len(parts) == 2:
            method, version = parts
            target = ""
        else:
            raise HTTPParseError(f"Invalid request line: {line!r}")

        return method, target, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        return parse_header_lines(lines)


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
) -> HTTPRequest:
    """
    Convenience function to parse an HTTP request in one call.
    """
    return RequestParser().parse(data, client_address)
