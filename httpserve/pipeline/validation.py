"""Request validation ahead of the file handler."""

from typing import AbstractSet, Optional

from httpserve.domain.http_types import HttpRequest, HttpResponse
from httpserve.domain.response_builders import method_not_allowed_response


class RequestEntityTooLarge(Exception):
    """Raised when a request body exceeds configured limits."""


def enforce_allowed_method(
    request: HttpRequest,
    allowed_methods: AbstractSet[str],
    security_headers: dict[str, str],
) -> Optional[HttpResponse]:
    """Return a 405 for methods outside the allowlist, else None."""
    if request.method in allowed_methods:
        return None
    return method_not_allowed_response(request, security_headers, allowed_methods)
