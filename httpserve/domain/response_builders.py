"""Pure HTTP response builders."""

from typing import Iterable, Optional

from httpserve.domain.cache import CacheEntry
from httpserve.domain.http_types import HttpRequest, HttpResponse, should_close


def _close_for(request: Optional[HttpRequest]) -> bool:
    if request is None:
        return True
    return should_close(request.headers, request.version)


def file_response(
    request: HttpRequest, entry: CacheEntry, security_headers: dict[str, str]
) -> HttpResponse:
    """Return a 200 carrying a cached file; HEAD keeps the headers only."""
    headers = {"Content-Type": entry.content_type, **security_headers}
    return HttpResponse(
        "HTTP/1.1 200 OK",
        headers,
        entry.body,
        should_close(request.headers, request.version),
        omit_body=request.method == "HEAD",
    )


def not_found_response(
    request: HttpRequest, security_headers: dict[str, str]
) -> HttpResponse:
    """Return an empty 404 reusing the connection preference."""
    return HttpResponse(
        "HTTP/1.1 404 Not Found",
        security_headers.copy(),
        b"",
        should_close(request.headers, request.version),
        omit_body=request.method == "HEAD",
    )


def method_not_allowed_response(
    request: HttpRequest,
    security_headers: dict[str, str],
    allowed_methods: Iterable[str],
) -> HttpResponse:
    """Produce a 405 response enumerating the supported HTTP methods."""
    headers = {"Allow": ", ".join(sorted(allowed_methods)), **security_headers}
    return HttpResponse(
        "HTTP/1.1 405 Method Not Allowed",
        headers,
        b"",
        should_close(request.headers, request.version),
    )


def redirect_response(
    request: HttpRequest, location: str, security_headers: dict[str, str]
) -> HttpResponse:
    """Produce a 301 pointing the client at ``location``."""
    headers = {"Location": location, **security_headers}
    return HttpResponse(
        "HTTP/1.1 301 Moved Permanently",
        headers,
        b"",
        should_close(request.headers, request.version),
        omit_body=request.method == "HEAD",
    )


def bad_request_response(
    request: Optional[HttpRequest], security_headers: dict[str, str]
) -> HttpResponse:
    """Produce a 400 response; without a parsed request the connection closes."""
    return HttpResponse(
        "HTTP/1.1 400 Bad Request", security_headers.copy(), b"", _close_for(request)
    )


def entity_too_large_response(security_headers: dict[str, str]) -> HttpResponse:
    """Produce a 413 response that always closes the connection."""
    return HttpResponse(
        "HTTP/1.1 413 Payload Too Large", security_headers.copy(), b"", True
    )


def draining_response(security_headers: dict[str, str]) -> HttpResponse:
    """Produce a 503 response indicating the server is shutting down."""
    headers = {"Connection": "close", **security_headers}
    return HttpResponse("HTTP/1.1 503 Service Unavailable", headers, b"draining", True)
