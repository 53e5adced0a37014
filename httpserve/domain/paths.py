"""URL path normalization shared by the loader and the request handler."""

import urllib.parse
from pathlib import PurePath
from typing import Optional


def url_path_for(relative: PurePath) -> str:
    """Return the cache key for a file path relative to the served root."""
    return "/" + relative.as_posix()


def normalize_url_path(raw_path: str) -> Optional[str]:
    """Decode and collapse a request path into a cache key.

    Returns None when the path cannot be made safe: undecodable escapes,
    NUL bytes, backslashes, or ``..`` segments that climb above the root.
    A trailing slash is kept so callers can apply the default document.
    """
    if raw_path == "":
        raw_path = "/"
    if not raw_path.startswith("/"):
        return None
    try:
        decoded = urllib.parse.unquote(raw_path, errors="strict")
    except UnicodeDecodeError:
        return None
    if "\x00" in decoded or "\\" in decoded:
        return None

    segments: list[str] = []
    raw_segments = decoded.split("/")
    for segment in raw_segments:
        if segment in ("", "."):
            continue
        if segment == "..":
            if not segments:
                return None
            segments.pop()
            continue
        segments.append(segment)

    if not segments:
        return "/"
    normalized = "/" + "/".join(segments)
    if raw_segments[-1] in ("", ".", ".."):
        normalized += "/"
    return normalized
