"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket: buffered request reading, response
writing and the connection's lifecycle state.

=============================================================================
TCP IS A BYTE STREAM
=============================================================================

TCP keeps bytes in order but does not keep message boundaries. One
request may arrive over several recv() calls, and one recv() may return
the tail of one request plus the head of the next:

    Client sends:   "GET / HTTP/1.1\r\n\r\nGET /echo/a HTTP/1.1\r\n\r\n"

    recv() #1  →  "GET / HTTP/1.1\r\n\r\nGET /ec"
    recv() #2  →  "ho/a HTTP/1.1\r\n\r\n"

So the reader accumulates bytes in a buffer and cuts requests out of
it:

    1. recv() until CRLF CRLF (end of headers) is buffered
    2. read Content-Length from the header block
    3. recv() until that many body bytes are buffered
    4. return headers + body, keep whatever follows for the next call

Step 4 is what makes pipelined requests work: the leftover bytes are
the start of the next request.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    READING ──► PARSED ──► DISPATCHED ──┬──► READING     (keep-alive)
                                        │
                                        └──► CLOSING ──► CLOSED

Every recv() uses a fresh buffer of `buffer_size` bytes (1024 unless
configured otherwise).

=============================================================================
"""

import socket
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional

from ..http.request import parse_header_lines, content_length_of


logger = logging.getLogger(__name__)


HEADER_TERMINATOR = b"\r\n\r\n"


class ConnectionState(Enum):
    """Connection lifecycle states."""
    READING = "reading"        # Waiting for / receiving request bytes
    PARSED = "parsed"          # A complete request was parsed
    DISPATCHED = "dispatched"  # The handler ran and the response was written
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Connection number assigned by the acceptor (for logging).
        state: Current connection state.
        requests_handled: Number of requests read on this connection.
        buffer_size: Bytes requested per recv().
        timeout: Read timeout in seconds, None to block forever.
        max_request_size: Upper bound for one buffered request.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: int = 0
    state: ConnectionState = ConnectionState.READING
    requests_handled: int = 0

    # Configuration (passed from ServerConfig)
    buffer_size: int = 1024
    timeout: Optional[float] = None
    max_request_size: int = 10 * 1024 * 1024

    # Bytes received but not yet returned as a request
    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read one complete HTTP request from the socket.

        Returns:
            The request bytes (header block, terminator, body), or None if
            the peer closed the connection, the read failed, or the read
            timed out before a full header block arrived.

        Raises:
            ValueError: If the buffered request exceeds max_request_size.
        """
        self.state = ConnectionState.READING

        try:
            # STEP 1: headers
            while HEADER_TERMINATOR not in self._buffer:
                chunk = self._recv()
                if not chunk:
                    return None
                self._append(chunk)

            header_end = self._buffer.find(HEADER_TERMINATOR)
            body_start = header_end + len(HEADER_TERMINATOR)

            # STEP 2: body length
            content_length = self._parse_content_length(self._buffer[:header_end])

            # STEP 3: body
            while len(self._buffer) - body_start < content_length:
                chunk = self._recv()
                if not chunk:
                    break  # Peer closed mid-body; hand over what we have
                self._append(chunk)

        except socket.timeout:
            logger.debug(f"[{self.id}] Read timed out")
            return None
        except OSError as e:
            logger.debug(f"[{self.id}] Read failed: {e}")
            return None

        # STEP 4: cut out this request, keep the rest (pipelining)
        request_end = min(body_start + content_length, len(self._buffer))
        request_data = self._buffer[:request_end]
        self._buffer = self._buffer[request_end:]

        self.requests_handled += 1
        return request_data

    def _append(self, chunk: bytes):
        self._buffer += chunk
        if len(self._buffer) > self.max_request_size:
            raise ValueError(f"Request too large: {len(self._buffer)} bytes")

    def _recv(self) -> bytes:
        """
        Receive up to buffer_size bytes.

        Returns:
            Received bytes, or empty bytes if the connection was closed or
            reset by the peer.
        """
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    def _parse_content_length(self, headers: bytes) -> int:
        """
        Find Content-Length in a raw header block.

        Uses the request parser's header rules (split at ": ", last
        duplicate wins) so reader and parser agree on where the body
        ends. Missing, malformed or negative values count as 0.
        """
        lines = headers.decode("utf-8", errors="replace").split("\r\n")[1:]
        return content_length_of(parse_header_lines(lines))

    # =========================================================================
    # STATE TRANSITIONS
    # =========================================================================

    def mark_parsed(self):
        self.state = ConnectionState.PARSED

    def mark_dispatched(self):
        self.state = ConnectionState.DISPATCHED

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        sendall() keeps writing until every byte is out or the socket
        fails.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Safe to call more than once.

        1. shutdown(SHUT_WR): send FIN so the client sees end-of-stream
        2. drain anything the client still sends (briefly)
        3. close(): release the file descriptor
        """
        if self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.requests_handled} requests")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
