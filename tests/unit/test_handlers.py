"""
Unit tests for route dispatch.
"""

import gzip
from pathlib import Path

import pytest

from minihttp.handlers import RequestHandler
from minihttp.http.request import HTTPRequest, parse_request
from minihttp.http.status_codes import HTTPStatus


def make_request(method="GET", target="/", headers=None, body=b"") -> HTTPRequest:
    return HTTPRequest(method=method, target=target, headers=headers or {}, body=body)


class TestSimpleRoutes:
    """Tests for the root, echo and user-agent routes."""

    def test_root(self, handler: RequestHandler):
        """Test that the root is a bare 200."""
        response = handler.dispatch(make_request(target="/"))

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_empty_target_is_root(self, handler: RequestHandler):
        """Test that a two-token request line routes to the root."""
        response = handler.dispatch(parse_request(b"GET HTTP/1.1\r\n\r\n"))

        assert response.status == HTTPStatus.OK

    def test_echo(self, handler: RequestHandler):
        """Test the exact echo response."""
        response = handler.dispatch(make_request(target="/echo/abc"))

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_echo_keeps_nested_path(self, handler: RequestHandler):
        """Test that echo returns every segment after the first."""
        response = handler.dispatch(make_request(target="/echo/a/b/c"))

        assert response.body == b"a/b/c"

    def test_user_agent(self, handler: RequestHandler):
        """Test that the User-Agent header is echoed as text."""
        request = make_request(target="/user-agent", headers={"user-agent": "foobar/1.2.3"})
        response = handler.dispatch(request)

        assert response.headers["Content-Type"] == "text/plain"
        assert response.body == b"foobar/1.2.3"

    def test_unknown_route(self, handler: RequestHandler):
        """Test that unknown routes are a bare 404."""
        response = handler.dispatch(make_request(target="/nope"))

        assert response.to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"

    @pytest.mark.parametrize("target", ["/", "/echo/x", "/nope", "/files/missing"])
    def test_close_is_echoed(self, handler: RequestHandler, target: str):
        """Test that every route echoes Connection: close."""
        request = make_request(target=target, headers={"connection": "close"})
        response = handler.dispatch(request)

        assert response.headers["Connection"] == "close"


class TestEncoding:
    """Tests for content negotiation in handlers."""

    def test_gzip_echo(self, handler: RequestHandler):
        """Test that gzip is picked from a mixed Accept-Encoding list."""
        request = make_request(
            target="/echo/abc",
            headers={"accept-encoding": "invalid-1, gzip, invalid-2"},
        )
        response = handler.dispatch(request)

        assert response.headers["Content-Encoding"] == "gzip"
        assert gzip.decompress(response.body) == b"abc"
        assert response.headers["Content-Length"] == str(len(response.body))

    def test_unsupported_encoding(self, handler: RequestHandler):
        """Test that an unknown encoding leaves the body plain."""
        request = make_request(target="/echo/abc", headers={"accept-encoding": "invalid"})
        response = handler.dispatch(request)

        assert "Content-Encoding" not in response.headers
        assert response.body == b"abc"

    def test_encoding_disabled(self, store):
        """Test that an empty encodings tuple turns compression off."""
        handler = RequestHandler(store, encodings=())
        request = make_request(target="/echo/abc", headers={"accept-encoding": "gzip"})

        assert handler.dispatch(request).body == b"abc"

    def test_not_found_is_never_encoded(self, handler: RequestHandler):
        """Test that 404s carry no Content-Encoding."""
        request = make_request(target="/nope", headers={"accept-encoding": "gzip"})

        assert "Content-Encoding" not in handler.dispatch(request).headers


class TestFiles:
    """Tests for GET and POST /files/<name>."""

    def test_get_existing(self, handler: RequestHandler, files_dir: Path):
        """Test the exact response for an existing file."""
        (files_dir / "foo").write_bytes(b"Hello, World!")
        response = handler.dispatch(make_request(target="/files/foo"))

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: application/octet-stream\r\n"
            b"Content-Length: 13\r\n"
            b"\r\n"
            b"Hello, World!"
        )

    def test_get_missing(self, handler: RequestHandler):
        """Test that a missing file is a bare 404."""
        response = handler.dispatch(make_request(target="/files/non_existant"))

        assert response.to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_get_directory(self, handler: RequestHandler, files_dir: Path):
        """Test that reading a directory is a 404."""
        (files_dir / "dir").mkdir()

        assert handler.dispatch(make_request(target="/files/dir")).status == HTTPStatus.NOT_FOUND

    def test_post_writes_content_length_bytes(self, handler: RequestHandler, files_dir: Path):
        """Test that only Content-Length bytes of the body are stored."""
        request = make_request(
            method="POST",
            target="/files/number",
            headers={"content-length": "5"},
            body=b"12345extra",
        )
        response = handler.dispatch(request)

        assert response.to_bytes() == b"HTTP/1.1 201 Created\r\n\r\n"
        assert (files_dir / "number").read_bytes() == b"12345"

    def test_post_then_get(self, handler: RequestHandler, sample_post_request: bytes):
        """Test that an uploaded file is served back."""
        handler.dispatch(parse_request(sample_post_request))
        response = handler.dispatch(make_request(target="/files/number"))

        assert response.body == b"12345"

    def test_post_write_failure_still_created(self, handler: RequestHandler):
        """Test that a failed write is still acknowledged with 201."""
        request = make_request(
            method="POST",
            target="/files/missing-dir/file",
            headers={"content-length": "1"},
            body=b"x",
        )

        assert handler.dispatch(request).status == HTTPStatus.CREATED

    def test_get_null_byte_name(self, handler: RequestHandler):
        """Test that a NUL in the file name is a 404."""
        request = parse_request(b"GET /files/a\x00b HTTP/1.1\r\n\r\n")

        assert handler.dispatch(request).to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_post_null_byte_name(self, handler: RequestHandler):
        """Test that a NUL in the upload name is still acknowledged with 201."""
        request = parse_request(b"POST /files/a\x00b HTTP/1.1\r\nContent-Length: 1\r\n\r\nx")

        assert handler.dispatch(request).to_bytes() == b"HTTP/1.1 201 Created\r\n\r\n"

    @pytest.mark.parametrize("method", ["PUT", "DELETE", "get"])
    def test_other_methods(self, handler: RequestHandler, method: str):
        """Test that /files only answers GET and POST."""
        response = handler.dispatch(make_request(method=method, target="/files/x"))

        assert response.status == HTTPStatus.NOT_FOUND

    def test_get_traversal(self, handler: RequestHandler, files_dir: Path):
        """Test that reading outside the store is a 404."""
        (files_dir.parent / "secret").write_bytes(b"s")
        response = handler.dispatch(make_request(target="/files/../secret"))

        assert response.status == HTTPStatus.NOT_FOUND

    def test_post_traversal(self, handler: RequestHandler, files_dir: Path):
        """Test that writing outside the store is a 404 and writes nothing."""
        request = make_request(
            method="POST",
            target="/files/../escaped",
            headers={"content-length": "1"},
            body=b"x",
        )
        response = handler.dispatch(request)

        assert response.status == HTTPStatus.NOT_FOUND
        assert not (files_dir.parent / "escaped").exists()
