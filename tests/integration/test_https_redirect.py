"""Integration tests for redirecting plaintext clients to https."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import requests

from tests.utils.http import send_raw_request

pytestmark = pytest.mark.integration

if TYPE_CHECKING:
    from tests.utils.server import ServerProcessInfo


@pytest.mark.parametrize("path", ["/index.html?x=1", "/missing.txt"])
def test_plaintext_requests_are_redirected(
    redirect_server_process: ServerProcessInfo, path: str
) -> None:
    base_url = redirect_server_process["base_url"]
    port = redirect_server_process["port"]

    response = requests.get(f"{base_url}{path}", allow_redirects=False, timeout=5)

    assert response.status_code == 301
    assert response.headers["Location"] == f"https://127.0.0.1:{port}{path}"
    assert response.content == b""


def test_post_is_redirected_not_rejected(
    redirect_server_process: ServerProcessInfo,
) -> None:
    response = requests.post(
        f"{redirect_server_process['base_url']}/index.html",
        allow_redirects=False,
        timeout=5,
    )

    assert response.status_code == 301


def test_missing_host_header_redirects_to_bind_address(
    redirect_server_process: ServerProcessInfo,
) -> None:
    response = send_raw_request(
        redirect_server_process["host"],
        redirect_server_process["port"],
        b"GET /index.html HTTP/1.0\r\nConnection: close\r\n\r\n",
    )

    assert response.status_code == 301
    assert response.headers["location"] == "https://127.0.0.1/index.html"


def test_forwarded_https_is_served(redirect_server_process: ServerProcessInfo) -> None:
    response = requests.get(
        f"{redirect_server_process['base_url']}/index.html",
        headers={"X-Forwarded-Proto": "https"},
        allow_redirects=False,
        timeout=5,
    )

    assert response.status_code == 200
    assert response.content == b"hello world!"


def test_forwarded_http_is_redirected(
    redirect_server_process: ServerProcessInfo,
) -> None:
    response = requests.get(
        f"{redirect_server_process['base_url']}/index.html",
        headers={"X-Forwarded-Proto": "http", "Host": "example.com"},
        allow_redirects=False,
        timeout=5,
    )

    assert response.status_code == 301
    assert response.headers["Location"] == "https://example.com/index.html"


def test_redirect_disabled_by_default(base_url: str) -> None:
    response = requests.get(f"{base_url}/index.html", allow_redirects=False, timeout=5)

    assert response.status_code == 200
