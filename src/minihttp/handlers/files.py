"""
File store behind the /files route.

Every name coming from a request target is resolved against the store
root, and anything that lands outside it is refused:

    root = /tmp/data

    "report.txt"          →  /tmp/data/report.txt        ✓
    "sub/../report.txt"   →  /tmp/data/report.txt        ✓
    "../../etc/passwd"    →  /etc/passwd                 ✗ FileAccessError

resolve() follows ".." and symlinks before the check, so a symlink that
points out of the store is refused as well.
"""

import errno
import logging
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


# Permission bits for newly created files (the process umask still applies)
FILE_MODE = 0o777


class FileAccessError(Exception):
    """Raised when a requested name resolves outside the store root."""

    def __init__(self, name: str):
        super().__init__(f"Path escapes file store: {name!r}")
        self.name = name


class FileStore:
    """
    Reads and writes whole files under a single root directory.

        store = FileStore("/tmp/data")
        store.write("hello.txt", b"hi")
        store.read("hello.txt")        # b"hi"
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def ensure_root(self):
        """Create the root directory (and parents) if it does not exist."""
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, name: str) -> Path:
        """
        Map a request name to a filesystem path inside the root.

        Raises:
            FileAccessError: If the path resolves outside the root.
            OSError: If the name cannot be a file name (embedded NUL).
        """
        if "\x00" in name:
            raise OSError(errno.EINVAL, "File name contains a null byte", name)

        full_path = (self.root / name).resolve()
        try:
            full_path.relative_to(self.root)
        except ValueError:
            logger.warning(f"Path traversal attempt: {name}")
            raise FileAccessError(name) from None
        return full_path

    def read(self, name: str) -> bytes:
        """
        Return the full contents of `name`.

        Raises:
            FileAccessError: If the name escapes the root.
            OSError: If the file is missing or unreadable.
        """
        return self.resolve(name).read_bytes()

    def write(self, name: str, data: bytes):
        """
        Create or truncate `name` and write `data` to it.

        New files get FILE_MODE permissions (masked by umask).

        Raises:
            FileAccessError: If the name escapes the root.
            OSError: If the file cannot be created or written.
        """
        path = self.resolve(name)
        path.touch(mode=FILE_MODE, exist_ok=True)
        path.write_bytes(data)
