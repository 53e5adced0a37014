"""Compose the redirect middleware, validation and file handler."""

import time

from httpserve.bootstrap.config import ALLOWED_METHODS, SECURITY_HEADERS
from httpserve.domain.correlation_id import get_logger
from httpserve.domain.http_types import HttpRequest, HttpResponse
from httpserve.handlers.file_handler import handle_request
from httpserve.pipeline.redirect import maybe_redirect, request_is_secure
from httpserve.pipeline.validation import enforce_allowed_method
from httpserve.transport.context import WorkerContext

ACCESS_LOGGER = get_logger("access")


def _fallback_host(address: str) -> str:
    return f"[{address}]" if ":" in address else address


def dispatch_request(request: HttpRequest, context: WorkerContext) -> HttpResponse:
    """Produce the response for one request.

    The redirect runs first so that, when enabled, plaintext clients never
    reach validation or the cache.
    """
    started = time.monotonic()
    response = maybe_redirect(
        request,
        request_is_secure(request, context.transport_secure),
        context.config.redirect_http,
        _fallback_host(context.config.address),
        SECURITY_HEADERS,
    )
    if response is None:
        response = enforce_allowed_method(request, ALLOWED_METHODS, SECURITY_HEADERS)
    if response is None:
        response = handle_request(request, context.cache)

    ACCESS_LOGGER.info(
        "Request served",
        extra={
            "event": "request_served",
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "bytes_out": 0 if response.omit_body else response.content_length,
            "duration_ms": round((time.monotonic() - started) * 1000, 3),
        },
    )
    return response
