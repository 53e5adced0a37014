"""Main connection acceptance loop."""

import logging
import socket
import ssl
import threading

from httpserve.bootstrap.config import SECURITY_HEADERS
from httpserve.domain.correlation_id import get_logger
from httpserve.domain.response_builders import draining_response
from httpserve.pipeline.io import send_response
from httpserve.transport.context import WorkerContext
from httpserve.transport.worker import handle_client

ACCEPT_LOGGER = get_logger("transport.accept")


def _start_worker(
    client_socket: socket.socket,
    client_address: tuple,
    context: WorkerContext,
) -> threading.Thread:
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={
                "event": "client_accepted",
                "client": f"{client_address[0]}:{client_address[1]}",
            },
        )
    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, context),
        name=f"httpserve-worker-{client_address[0]}:{client_address[1]}",
        daemon=True,
    )
    if context.lifecycle is not None:
        context.lifecycle.register_worker(thread)
    thread.start()
    return thread


def _refuse_while_draining(client_socket: socket.socket) -> None:
    try:
        if not isinstance(client_socket, ssl.SSLSocket):
            send_response(client_socket, draining_response(SECURITY_HEADERS))
    except OSError:
        pass
    finally:
        client_socket.close()


def serve_forever(server_socket: socket.socket, context: WorkerContext) -> None:
    """Accept connections until the lifecycle asks to stop.

    The listening socket is closed on exit and in-flight workers get
    ``shutdown_grace_seconds`` to finish.
    """
    lifecycle = context.lifecycle
    config = context.config
    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={
            "event": "server_listening",
            "host": config.address,
            "port": server_socket.getsockname()[1],
            "tls": context.transport_secure,
            "redirect_http": config.redirect_http,
            "entries": len(context.cache),
        },
    )

    try:
        while lifecycle is None or not lifecycle.should_stop():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle is not None and lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={"event": "accept_error", "error_type": type(error).__name__},
                )
                continue

            if lifecycle is not None and lifecycle.is_draining():
                _refuse_while_draining(client_socket)
                continue
            _start_worker(client_socket, client_address, context)
    finally:
        server_socket.close()
        if lifecycle is not None:
            ACCEPT_LOGGER.info(
                "Waiting for active connections to complete",
                extra={
                    "event": "shutdown_waiting",
                    "grace_seconds": config.shutdown_grace_seconds,
                },
            )
            lifecycle.wait_for_workers(config.shutdown_grace_seconds)
        ACCEPT_LOGGER.info("Server shutdown complete", extra={"event": "server_stopped"})
