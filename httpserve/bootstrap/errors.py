"""Fatal startup failures."""


class StartupError(Exception):
    """Raised when the server cannot start; the process exits non-zero."""

    event = "startup_failed"


class LoadError(StartupError):
    """The served directory could not be loaded completely into memory."""

    event = "cache_load_failed"


class BindError(StartupError):
    """The listening socket could not be created."""

    event = "bind_failed"


class TlsError(StartupError):
    """The TLS certificate or key could not be loaded."""

    event = "tls_setup_failed"
