"""Per-connection worker: read requests, dispatch, write responses."""

import logging
import socket
import ssl
import threading
from typing import Optional

from httpserve.bootstrap.config import MAX_BODY_BYTES, SECURITY_HEADERS
from httpserve.domain.correlation_id import (
    clear_correlation_id,
    generate_correlation_id,
    get_logger,
    set_correlation_id,
)
from httpserve.domain.http_types import HttpRequest
from httpserve.domain.response_builders import (
    bad_request_response,
    draining_response,
    entity_too_large_response,
)
from httpserve.pipeline.dispatcher import dispatch_request
from httpserve.pipeline.io import receive_request, send_response
from httpserve.pipeline.validation import RequestEntityTooLarge
from httpserve.transport.context import WorkerContext

WORKER_LOGGER = get_logger("transport.worker")


def _format_client(client_address: tuple) -> str:
    return f"{client_address[0]}:{client_address[1]}"


def _read_request(
    client_socket: socket.socket, buffer: bytes, client: str
) -> tuple[Optional[HttpRequest], bytes]:
    """Read one request; on protocol errors answer them and return None."""
    try:
        return receive_request(client_socket, buffer)
    except RequestEntityTooLarge:
        WORKER_LOGGER.warning(
            "Request body size exceeded limit",
            extra={"event": "body_size_exceeded", "client": client, "bytes": MAX_BODY_BYTES},
        )
        send_response(client_socket, entity_too_large_response(SECURITY_HEADERS))
    except ValueError as error:
        WORKER_LOGGER.warning(
            "Malformed request received",
            extra={"event": "malformed_request", "client": client, "error": str(error)},
        )
        send_response(client_socket, bad_request_response(None, SECURITY_HEADERS))
    return None, b""


def _serve_connection(
    client_socket: socket.socket, client: str, context: WorkerContext
) -> None:
    lifecycle = context.lifecycle
    buffer = b""
    while True:
        set_correlation_id(generate_correlation_id())
        try:
            request, buffer = _read_request(client_socket, buffer, client)
            if request is None:
                break

            if lifecycle is not None and lifecycle.is_draining():
                send_response(client_socket, draining_response(SECURITY_HEADERS))
                break

            response = dispatch_request(request, context)
            send_response(client_socket, response)
            if response.close_connection:
                break
        finally:
            clear_correlation_id()


def handle_client(
    client_socket: socket.socket,
    client_address: tuple,
    context: WorkerContext,
) -> None:
    """Serve requests on one connection until either side closes it.

    The accept loop registers the worker thread before starting it; this
    function releases that registration when the connection ends.
    """
    current_thread = threading.current_thread()
    lifecycle = context.lifecycle
    client = _format_client(client_address)

    try:
        client_socket.settimeout(context.config.socket_timeout)
        if isinstance(client_socket, ssl.SSLSocket):
            client_socket.do_handshake()
        if WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            WORKER_LOGGER.debug(
                "Connection opened", extra={"event": "connection_opened", "client": client}
            )
        _serve_connection(client_socket, client, context)
    except (ConnectionError, TimeoutError, OSError) as error:
        # ssl.SSLError is an OSError: failed handshakes land here too
        WORKER_LOGGER.info(
            "Connection ended with error",
            extra={
                "event": "connection_error",
                "client": client,
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": client,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        try:
            client_socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass
        client_socket.close()
        if lifecycle is not None:
            lifecycle.cleanup_worker(current_thread)
        if WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            WORKER_LOGGER.debug(
                "Socket closed", extra={"event": "socket_closed", "client": client}
            )
