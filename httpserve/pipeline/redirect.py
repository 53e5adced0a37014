"""Plaintext to HTTPS redirect middleware."""

import re
import urllib.parse
from typing import Optional

from httpserve.domain.correlation_id import get_logger
from httpserve.domain.http_types import HttpRequest, HttpResponse
from httpserve.domain.response_builders import redirect_response

REDIRECT_LOGGER = get_logger("pipeline.redirect")

SECURE_SCHEME = "https"

# reg-name or IP literal with an optional port; no userinfo, no path
_HOST_PATTERN = re.compile(r"^(\[[0-9A-Fa-f:.]+\]|[A-Za-z0-9._~!$&'()*+,;=%-]+)(:\d{1,5})?$")


def request_is_secure(request: HttpRequest, transport_secure: bool) -> bool:
    """Decide whether the client reached us over TLS.

    A TLS-terminating proxy reports the client's scheme in
    ``X-Forwarded-Proto``; when that header is present it wins over the
    state of our own socket.
    """
    forwarded_proto = request.headers.get("x-forwarded-proto")
    if forwarded_proto:
        return forwarded_proto.split(",", 1)[0].strip().lower() == SECURE_SCHEME
    return transport_secure


def _valid_host(host: Optional[str]) -> bool:
    return bool(host) and _HOST_PATTERN.match(host) is not None


def secure_location(request: HttpRequest, fallback_host: str) -> str:
    """Build the https URL for the same host, path and query."""
    if "://" in request.target:
        parts = urllib.parse.urlsplit(request.target)
        host = parts.netloc
        path_and_query = parts.path or "/"
        if parts.query:
            path_and_query = f"{path_and_query}?{parts.query}"
    else:
        host = request.headers.get("host", "")
        path_and_query = request.target if request.target.startswith("/") else "/"
    if not _valid_host(host):
        host = fallback_host
    return f"{SECURE_SCHEME}://{host}{path_and_query}"


def maybe_redirect(
    request: HttpRequest,
    is_secure: bool,
    enabled: bool,
    fallback_host: str,
    security_headers: dict[str, str],
) -> Optional[HttpResponse]:
    """Return a 301 to the https URL for plaintext requests, else None."""
    if not enabled or is_secure:
        return None
    location = secure_location(request, fallback_host)
    REDIRECT_LOGGER.info(
        "Redirecting to https",
        extra={"event": "https_redirect", "path": request.path, "location": location},
    )
    return redirect_response(request, location, security_headers)
