"""Serve files from the in-memory cache."""

import logging
from typing import Optional

from httpserve.bootstrap.config import SECURITY_HEADERS
from httpserve.domain.cache import Cache, CacheEntry
from httpserve.domain.correlation_id import get_logger
from httpserve.domain.http_types import HttpRequest, HttpResponse
from httpserve.domain.paths import normalize_url_path
from httpserve.domain.response_builders import file_response, not_found_response

FILE_LOGGER = get_logger("handlers.file")

DEFAULT_DOCUMENT = "index.html"


def resolve_entry(cache: Cache, raw_path: str) -> Optional[CacheEntry]:
    """Find the cache entry a request path refers to.

    Paths ending in ``/`` that miss fall back to their ``index.html``.
    """
    url_path = normalize_url_path(raw_path)
    if url_path is None:
        FILE_LOGGER.warning(
            "Unsafe request path treated as missing",
            extra={"event": "unsafe_path", "path": raw_path},
        )
        return None
    entry = cache.lookup(url_path)
    if entry is None and url_path.endswith("/"):
        entry = cache.lookup(url_path + DEFAULT_DOCUMENT)
    return entry


def handle_request(request: HttpRequest, cache: Cache) -> HttpResponse:
    """Answer a GET or HEAD from the cache; the method was already validated."""
    entry = resolve_entry(cache, request.path)
    if entry is None:
        if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
            FILE_LOGGER.debug(
                "Cache miss",
                extra={"event": "cache_miss", "path": request.path},
            )
        return not_found_response(request, SECURITY_HEADERS)

    if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "Cache hit",
            extra={
                "event": "cache_hit",
                "path": entry.path,
                "bytes": entry.size,
                "content_type": entry.content_type,
            },
        )
    return file_response(request, entry, SECURITY_HEADERS)
