"""Server configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass
from typing import Optional

from httpserve import __version__


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


MAX_BODY_BYTES = _env_int("HTTPSERVE_MAX_BODY_BYTES", 64 * 1024)
MAX_HEADER_BYTES = _env_int("HTTPSERVE_MAX_HEADER_BYTES", 16 * 1024)
DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_SOCKET_TIMEOUT = _env_int("HTTPSERVE_SOCKET_TIMEOUT", 60)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("HTTPSERVE_SHUTDOWN_GRACE_SECONDS", 30)

HEADER_DELIMITER = b"\r\n\r\n"
ALLOWED_METHODS = frozenset({"GET", "HEAD"})

SECURITY_HEADERS = {"X-Content-Type-Options": "nosniff"}


@dataclass(frozen=True)
class ServerConfig:
    """Everything the serving layer needs, fixed for the process lifetime."""

    directory: str
    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    redirect_http: bool = False
    cert: Optional[str] = None
    key: Optional[str] = None
    socket_timeout: int = DEFAULT_SOCKET_TIMEOUT
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS
    log_level: str = "INFO"
    log_destination: str = "stdout"

    @property
    def tls_enabled(self) -> bool:
        return bool(self.cert and self.key)


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(
        prog="httpserve", description="Serve files from a directory"
    )
    parser.add_argument("directory", metavar="DIR", help="Set the directory to serve")
    parser.add_argument(
        "-a",
        "--address",
        default=DEFAULT_ADDRESS,
        help=f"Sets the address to bind to (default: {DEFAULT_ADDRESS})",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Set the port to listen on (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "-r",
        "--redirect-http",
        action="store_true",
        help="Redirect plaintext requests to https",
    )
    parser.add_argument("--cert", help="Path to TLS certificate file")
    parser.add_argument("--key", help="Path to TLS private key file")
    default_log_level = os.getenv("HTTPSERVE_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("HTTPSERVE_LOG_DESTINATION", "stdout")
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--socket-timeout",
        type=int,
        default=DEFAULT_SOCKET_TIMEOUT,
        help="Idle socket timeout in seconds",
    )
    parser.add_argument(
        "--shutdown-grace-seconds",
        type=int,
        default=DEFAULT_SHUTDOWN_GRACE_SECONDS,
        help="Grace period in seconds for graceful shutdown",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def build_server_config(args: argparse.Namespace) -> ServerConfig:
    return ServerConfig(
        directory=args.directory,
        address=args.address,
        port=args.port,
        redirect_http=args.redirect_http,
        cert=args.cert,
        key=args.key,
        socket_timeout=args.socket_timeout,
        shutdown_grace_seconds=args.shutdown_grace_seconds,
        log_level=args.log_level,
        log_destination=args.log_destination,
    )
