"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can emit, with their reason phrases.

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      └── Reason phrase (from _STATUS_PHRASES)
              └───────── Status code

    200 OK                     - Root, echo, user-agent, file download
    201 Created                - File upload
    400 Bad Request            - Request line could not be parsed
    404 Not Found              - Unknown route, missing file, bad method
    500 Internal Server Error  - A handler raised

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes as an IntEnum.

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    CREATED = 201

    BAD_REQUEST = 400
    NOT_FOUND = 404

    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
