"""Listening socket creation and TLS configuration."""

import socket
import ssl

from httpserve.bootstrap.config import ServerConfig
from httpserve.bootstrap.errors import BindError, TlsError
from httpserve.domain.correlation_id import get_logger

SOCKET_LOGGER = get_logger("bootstrap.socket")

ACCEPT_POLL_SECONDS = 0.5


def create_tls_context(cert: str, key: str) -> ssl.SSLContext:
    """Build a server-side TLS context from PEM certificate and key files."""
    try:
        tls_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        tls_context.load_cert_chain(cert, key)
    except (ssl.SSLError, OSError) as error:
        SOCKET_LOGGER.critical(
            "Failed to load TLS certificates",
            extra={"event": "tls_setup_failed", "error": str(error)},
        )
        raise TlsError(f"Unable to load TLS certificate {cert}: {error}") from error
    return tls_context


def create_server_socket(config: ServerConfig) -> socket.socket:
    """Bind the listening socket, wrapping it in TLS when configured.

    The TLS handshake is deferred to the worker thread so a slow client
    cannot stall the accept loop.
    """
    tls_context = (
        create_tls_context(config.cert, config.key) if config.tls_enabled else None
    )
    family = socket.AF_INET6 if ":" in config.address else socket.AF_INET
    try:
        server_socket = socket.create_server((config.address, config.port), family=family)
    except OSError as error:
        raise BindError(
            f"Unable to bind {config.address}:{config.port}: {error}"
        ) from error
    server_socket.settimeout(ACCEPT_POLL_SECONDS)
    if tls_context is not None:
        server_socket = tls_context.wrap_socket(
            server_socket, server_side=True, do_handshake_on_connect=False
        )
    return server_socket
