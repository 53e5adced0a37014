"""Process entry point: configure, load, bind, serve."""

import signal
import sys
from typing import Optional

from httpserve.bootstrap.config import ServerConfig, build_server_config, parse_cli_args
from httpserve.bootstrap.errors import StartupError
from httpserve.bootstrap.loader import load_cache
from httpserve.bootstrap.logging_setup import configure_logging
from httpserve.bootstrap.socket_factory import create_server_socket
from httpserve.domain.correlation_id import get_logger
from httpserve.lifecycle.state import ServerLifecycle
from httpserve.transport.accept_loop import serve_forever
from httpserve.transport.context import WorkerContext

APP_LOGGER = get_logger("app")


def _install_signal_handlers(lifecycle: ServerLifecycle) -> None:
    def shutdown_handler(signum: int, _frame) -> None:
        APP_LOGGER.info(
            "Received shutdown signal",
            extra={"event": "signal_received", "signal": signum},
        )
        lifecycle.begin_draining()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)


def run(config: ServerConfig, lifecycle: Optional[ServerLifecycle] = None) -> None:
    """Load the directory, bind, and serve until shutdown.

    Raises ``StartupError`` before any socket is bound if the directory
    cannot be loaded, and afterwards if binding fails.
    """
    lifecycle = lifecycle or ServerLifecycle()
    APP_LOGGER.info(
        "Starting httpserve",
        extra={
            "event": "server_starting",
            "host": config.address,
            "port": config.port,
            "directory": config.directory,
            "redirect_http": config.redirect_http,
            "tls": config.tls_enabled,
            "socket_timeout": config.socket_timeout,
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
        },
    )
    cache = load_cache(config.directory)
    server_socket = create_server_socket(config)
    context = WorkerContext(
        cache=cache,
        config=config,
        lifecycle=lifecycle,
        transport_secure=config.tls_enabled,
    )
    serve_forever(server_socket, context)


def main(argv: Optional[list[str]] = None) -> None:
    """Console entry point; exits 1 on any startup failure."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    config = build_server_config(args)
    configure_logging(config.log_level, config.log_destination)

    lifecycle = ServerLifecycle()
    _install_signal_handlers(lifecycle)
    try:
        run(config, lifecycle)
    except StartupError as error:
        APP_LOGGER.critical(
            "Server failed to start",
            extra={
                "event": error.event,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
        print(f"httpserve: {error}", file=sys.stderr)
        sys.exit(1)
