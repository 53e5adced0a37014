"""Unit tests for request path normalization."""

from pathlib import PurePosixPath, PureWindowsPath

import pytest

from httpserve.domain.paths import normalize_url_path, url_path_for


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("/index.html", "/index.html"),
        ("", "/"),
        ("/", "/"),
        ("//css//site.css", "/css/site.css"),
        ("/./css/./site.css", "/css/site.css"),
        ("/css/../index.html", "/index.html"),
        ("/docs/", "/docs/"),
        ("/docs/.", "/docs/"),
        ("/docs/sub/..", "/docs/"),
        ("/docs/guide%20page.txt", "/docs/guide page.txt"),
        ("/css%2Fsite.css", "/css/site.css"),
        ("/caf%C3%A9.txt", "/café.txt"),
        ("/Index.HTML", "/Index.HTML"),
    ],
)
def test_normalize_accepts_safe_paths(raw, expected):
    assert normalize_url_path(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "/..",
        "/../etc/passwd",
        "/css/../../secret",
        "/%2e%2e/secret",
        "/a%00b",
        "/a\\b",
        "/a%5Cb",
        "/%FF",
        "index.html",
        "*",
    ],
)
def test_normalize_rejects_unsafe_paths(raw):
    assert normalize_url_path(raw) is None


def test_url_path_for_uses_forward_slashes():
    assert url_path_for(PurePosixPath("css/site.css")) == "/css/site.css"
    assert url_path_for(PureWindowsPath("css\\site.css")) == "/css/site.css"
