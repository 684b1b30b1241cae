"""
Command-line entry point.

    python -m minihttp
    python -m minihttp --port 8080 --directory ./files
"""

import argparse
import sys

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_FILES_DIR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server with echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                           # 0.0.0.0:4221, default directory
  python -m minihttp --port 8080               # Custom port
  python -m minihttp --directory ./files       # Serve /files from ./files
  python -m minihttp --log-level DEBUG         # Verbose logging
        """
    )

    parser.add_argument(
        "--host", "-H",
        default=DEFAULT_HOST,
        help=f"Host to bind to (default: {DEFAULT_HOST})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to listen on (default: {DEFAULT_PORT})"
    )

    parser.add_argument(
        "--directory", "-d",
        default=DEFAULT_FILES_DIR,
        help=f"Directory behind /files/ (default: {DEFAULT_FILES_DIR})"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        files_dir=args.directory,
        log_level=args.log_level,
    )

    try:
        server = HTTPServer(config)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
