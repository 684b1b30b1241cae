"""
=============================================================================
CONTENT-ENCODING NEGOTIATION
=============================================================================

Picks a compression scheme for a response and applies it to the body.

=============================================================================
CONTENT NEGOTIATION
=============================================================================

The client lists the encodings it understands:

    Request:
    ┌───────────────────────────────────────────────────────────────┐
    │  GET /echo/abc HTTP/1.1                                       │
    │  Accept-Encoding: invalid-1, gzip, invalid-2                  │
    └───────────────────────────────────────────────────────────────┘

We walk that list in the client's order and take the first entry we
support. Only gzip is supported, so the answer is either "gzip" or "":

    Response:
    ┌───────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 200 OK                                              │
    │  Content-Encoding: gzip                                       │
    │  Content-Type: text/plain                                     │
    │  Content-Length: 23          ← length of the COMPRESSED body  │
    │                                                               │
    │  <gzip bytes>                                                 │
    └───────────────────────────────────────────────────────────────┘

Unlike a general compression middleware there is no size threshold and no
content-type filter: if the client asked for gzip, the body is gzipped.
Quality values (";q=0.5") are not interpreted.

=============================================================================
"""

import gzip
from typing import Callable, Dict, Iterable, Tuple


GZIP = "gzip"

SUPPORTED_ENCODINGS: Tuple[str, ...] = (GZIP,)

_ENCODERS: Dict[str, Callable[[bytes, int], bytes]] = {
    GZIP: lambda data, level: gzip.compress(data, compresslevel=level),
}


def parse_accept_encoding(header: str) -> list[str]:
    """
    Split an Accept-Encoding value into its tokens.

    "gzip, deflate" → ["gzip", "deflate"]
    """
    if not header:
        return []
    return [token.strip() for token in header.split(",") if token.strip()]


def negotiate_encoding(
    accept_encoding: str,
    supported: Iterable[str] = SUPPORTED_ENCODINGS,
) -> str:
    """
    Choose the response encoding.

    Args:
        accept_encoding: Raw Accept-Encoding header value ("" if absent).
        supported: Encodings the server can produce.

    Returns:
        The first client token found in `supported`, or "" when the header
        is missing or nothing matches.
    """
    supported = set(supported)
    for scheme in parse_accept_encoding(accept_encoding):
        if scheme in supported:
            return scheme
    return ""


def encode_body(body: bytes, scheme: str, level: int = 6) -> bytes:
    """
    Run the whole body through the encoder for `scheme`.

    The result replaces the body, so Content-Length must be computed
    from the returned bytes.

    Raises:
        ValueError: If `scheme` has no encoder.
    """
    try:
        encoder = _ENCODERS[scheme]
    except KeyError:
        raise ValueError(f"Unsupported content encoding: {scheme}") from None
    return encoder(body, level)
