"""
=============================================================================
HANDLERS MODULE
=============================================================================

The server's routes and the file store behind /files.

    Request ──► RequestHandler.dispatch ──► route method ──► HTTPResponse
                                                  │
                                                  └──► FileStore (files)

=============================================================================
"""

from .files import FileStore, FileAccessError
from .routes import RequestHandler

__all__ = [
    "FileStore",
    "FileAccessError",
    "RequestHandler",
]
