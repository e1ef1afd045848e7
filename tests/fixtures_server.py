"""Common server fixtures for testing."""

import logging
from collections.abc import Generator

import pytest

from counter_e2e.config import Settings
from counter_e2e.server_process import ServerStartupError, start_static_server

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def static_server(settings: Settings) -> Generator[str, None, None]:
    """Serve the site under test once for the whole run and yield its URL.

    The server's output is relayed into the test log with a [SERVER] prefix, which makes
    startup failures easier to debug.
    """
    try:
        server = start_static_server(settings.port, root=settings.site_root, host=settings.host)
    except ServerStartupError as e:
        pytest.fail(str(e))

    try:
        yield server.url
    finally:
        server.stop()
