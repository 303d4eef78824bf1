"""
Pytest configuration and fixtures for the HailTrace scraper tests.

No real browser or network is used: pages are MagicMocks whose
Playwright coroutine methods are AsyncMocks.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hailtrace_scraper.core.config import Credentials, ScraperConfig


def make_page(url="https://app.hailtrace.com/maps"):
    """Fake Playwright page with async methods stubbed."""
    page = MagicMock()
    page.url = url

    for name in (
        'goto', 'evaluate', 'evaluate_handle', 'query_selector', 'wait_for_selector',
        'wait_for_url', 'screenshot', 'route', 'close',
    ):
        setattr(page, name, AsyncMock())

    page.query_selector.return_value = None
    page.keyboard.press = AsyncMock()
    page.keyboard.type = AsyncMock()
    page.mouse.click = AsyncMock()

    text_locator = MagicMock()
    text_locator.first.click = AsyncMock()
    page.get_by_text.return_value = text_locator

    return page


def make_element(visible=True):
    element = MagicMock()
    for name in ('click', 'type', 'press', 'focus', 'bounding_box', 'is_visible'):
        setattr(element, name, AsyncMock())
    element.is_visible.return_value = visible
    return element


@pytest.fixture
def page():
    return make_page()


@pytest.fixture
def config(tmp_path):
    """Configuration with every fixed delay collapsed to zero."""
    config = ScraperConfig(verbose=False, load_poll_ms=0, load_timeout_ms=50)
    config.output_dir = str(tmp_path / "exports")
    config.delay = lambda ms: 0
    return config


@pytest.fixture
def credentials():
    return Credentials(email="rep@example.com", password="hunter2")


@pytest.fixture
def engine(page, config):
    """Engine stand-in for components that only need page/goto/screenshot."""
    engine = MagicMock()
    engine.page = page
    engine.goto = AsyncMock()
    engine.screenshot = AsyncMock(return_value=None)
    return engine
