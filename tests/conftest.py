"""Browser fixtures for the counter suite.

The browser is launched once per run and every test gets a fresh page, closed after
the test. Launch arguments come from pytest-playwright's command line options
(``--headed``, ``--slowmo``, ...) with the ``SHOW_BROWSER`` environment toggle applied on top.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from playwright.async_api import Browser, Page, async_playwright

from counter_e2e.config import Settings

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def settings() -> Settings:
    return Settings.from_env()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def async_browser(
    settings: Settings, browser_type_launch_args: dict[str, Any]
) -> AsyncGenerator[Browser, None]:
    launch_args = {**browser_type_launch_args, **settings.browser_launch_args()}
    logger.info(f"Launching {settings.browser_name} with {launch_args=}")
    async with async_playwright() as p:
        browser_type = getattr(p, settings.browser_name)
        browser = await browser_type.launch(**launch_args)
        try:
            yield browser
        finally:
            await browser.close()


@pytest_asyncio.fixture(loop_scope="session")
async def async_page(async_browser: Browser) -> AsyncGenerator[Page, None]:
    page = await async_browser.new_page()
    try:
        yield page
    finally:
        await page.close()
