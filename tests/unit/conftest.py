"""Shared fixtures for unit tests."""

import logging

import pytest

from httpserve.bootstrap.config import ServerConfig
from httpserve.bootstrap.loader import load_cache
from httpserve.domain.cache import Cache
from httpserve.transport.context import WorkerContext


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure logs propagate to root so caplog can catch them."""
    logger = logging.getLogger("httpserve")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate


@pytest.fixture()
def site_cache(site_directory) -> Cache:
    return load_cache(site_directory)


@pytest.fixture()
def make_context(site_cache, site_directory):
    """Build a WorkerContext over the sample site."""

    def _make(redirect_http: bool = False, transport_secure: bool = False):
        config = ServerConfig(
            directory=str(site_directory), redirect_http=redirect_http
        )
        return WorkerContext(
            cache=site_cache, config=config, transport_secure=transport_secure
        )

    return _make

