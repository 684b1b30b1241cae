"""
=============================================================================
HTTP MODULE
=============================================================================

HTTP/1.1 message handling.

    request.py       raw bytes → HTTPRequest
    path.py          request target → route key + argument
    encoding.py      Accept-Encoding negotiation, gzip
    response.py      HTTPResponse → bytes
    status_codes.py  status codes and reason phrases

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .path import RequestPath
from .encoding import SUPPORTED_ENCODINGS, negotiate_encoding, encode_body
from .response import (
    HTTPResponse, ResponseBuilder,
    ok, created, not_found, bad_request, internal_error,
)
from .status_codes import HTTPStatus

__all__ = [
    # Request
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",
    "RequestPath",
    # Encoding
    "SUPPORTED_ENCODINGS",
    "negotiate_encoding",
    "encode_body",
    # Response
    "HTTPResponse",
    "ResponseBuilder",
    "HTTPStatus",
    "ok",
    "created",
    "not_found",
    "bad_request",
    "internal_error",
]
