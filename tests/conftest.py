"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Generator

import pytest

from tests.utils.server import PROJECT_ROOT, ServerProcessInfo, launch_server
from tests.utils.site import populate_site

if TYPE_CHECKING:
    from _pytest.tmpdir import TempPathFactory


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Expose the repository root path to tests."""

    return PROJECT_ROOT


@pytest.fixture()
def site_directory(tmp_path: Path) -> Path:
    """A small static site matching SITE_FILES."""

    return populate_site(tmp_path / "site")


@pytest.fixture(name="server_process")
def _server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the server in a background process for integration tests."""

    directory = populate_site(tmp_path_factory.mktemp("site"))
    log_file = tmp_path_factory.mktemp("logs") / "server.log"
    yield from launch_server(directory, log_file)


@pytest.fixture(name="redirect_server_process")
def _redirect_server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the server with plaintext-to-https redirects enabled."""

    directory = populate_site(tmp_path_factory.mktemp("site-redirect"))
    log_file = tmp_path_factory.mktemp("logs-redirect") / "server.log"
    yield from launch_server(directory, log_file, ["--redirect-http"])


@pytest.fixture()
def base_url(server_process: ServerProcessInfo) -> str:
    """Expose the running server base URL to integration tests."""

    return server_process["base_url"]
