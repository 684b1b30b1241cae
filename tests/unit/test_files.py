"""
Unit tests for the file store.
"""

import errno
import os
import stat
from pathlib import Path

import pytest

from minihttp.handlers.files import FileStore, FileAccessError


def test_write_then_read(store: FileStore, files_dir: Path):
    """Test that written bytes land under the root and read back."""
    store.write("hello.txt", b"hi there")

    assert (files_dir / "hello.txt").read_bytes() == b"hi there"
    assert store.read("hello.txt") == b"hi there"


def test_write_truncates_existing(store: FileStore):
    """Test that rewriting a file replaces its contents."""
    store.write("a", b"long content")
    store.write("a", b"short")

    assert store.read("a") == b"short"


def test_new_file_permissions(store: FileStore, files_dir: Path):
    """Test that new files are world-accessible when umask allows it."""
    old_umask = os.umask(0)
    try:
        store.write("perm", b"x")
    finally:
        os.umask(old_umask)

    assert stat.S_IMODE((files_dir / "perm").stat().st_mode) == 0o777


def test_read_missing(store: FileStore):
    """Test that a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        store.read("nope")


@pytest.mark.parametrize("name", [
    "../outside",
    "../../etc/passwd",
    "sub/../../outside",
])
def test_traversal_rejected(store: FileStore, name: str):
    """Test that names escaping the root are refused."""
    with pytest.raises(FileAccessError):
        store.resolve(name)

    with pytest.raises(FileAccessError):
        store.write(name, b"x")


def test_dotdot_inside_root_allowed(store: FileStore, files_dir: Path):
    """Test that ".." staying inside the root is fine."""
    (files_dir / "sub").mkdir()
    store.write("sub/../inside", b"ok")

    assert (files_dir / "inside").read_bytes() == b"ok"


def test_symlink_out_of_root_rejected(store: FileStore, files_dir: Path, tmp_path: Path):
    """Test that a symlink pointing out of the root is refused."""
    secret = tmp_path / "secret"
    secret.write_bytes(b"s")
    (files_dir / "link").symlink_to(secret)

    with pytest.raises(FileAccessError):
        store.read("link")


def test_null_byte_name(store: FileStore):
    """Test that a NUL in a name is an ordinary OSError for read and write."""
    with pytest.raises(OSError) as exc_info:
        store.read("a\x00b")
    assert exc_info.value.errno == errno.EINVAL

    with pytest.raises(OSError):
        store.write("a\x00b", b"x")


def test_ensure_root(tmp_path: Path):
    """Test that the root is created with parents, repeatedly."""
    store = FileStore(tmp_path / "a" / "b")
    store.ensure_root()
    store.ensure_root()

    assert (tmp_path / "a" / "b").is_dir()
