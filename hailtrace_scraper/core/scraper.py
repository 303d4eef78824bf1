"""
HailTrace scraper: one browser session from login to extracted result.

Flow:
1. PlaywrightEngine launches Chromium with NetworkCapture attached
2. Login through the dashboard form
3. SearchOrchestrator runs an address, coordinate or territory search
4. StormDataExtractor reads the page, falling back to captured API data
"""

import asyncio
import time
from typing import Dict, Optional

from playwright.async_api import Error as PlaywrightError

from .config import Credentials, ScraperConfig, get_credentials
from .models import ExtractionResult
from ..dynamic.browser_engine import PlaywrightEngine
from ..dynamic.element_locator import ElementLocator
from ..dynamic.load_detector import LoadDetector
from ..dynamic.network_capture import NetworkCapture
from ..dynamic.page_inspector import PageInspector
from ..dynamic.search_orchestrator import SearchOrchestrator, SearchOutcome
from ..dynamic.targets import report_button_target
from ..extractors.storm_extractor import StormDataExtractor
from ..storage.json_storage import JSONStorage


def timestamp_ms() -> int:
    return int(time.time() * 1000)


class HailTraceScraper:
    """
    Async context manager around one HailTrace session.

        async with HailTraceScraper(config, credentials) as scraper:
            await scraper.login()
            result = await scraper.search_address("123 Main St, Arlington, VA")
    """

    def __init__(self, config: ScraperConfig = None, credentials: Credentials = None):
        self.config = config or ScraperConfig()
        self.credentials = credentials

        self.capture = NetworkCapture()
        self.engine = PlaywrightEngine(self.config, capture=self.capture)
        self.storage = JSONStorage()

        # Page-bound components, created in init()
        self.locator: Optional[ElementLocator] = None
        self.load_detector: Optional[LoadDetector] = None
        self.orchestrator: Optional[SearchOrchestrator] = None
        self.extractor: Optional[StormDataExtractor] = None
        self.inspector: Optional[PageInspector] = None

        self.last_outcome: Optional[SearchOutcome] = None

    async def __aenter__(self) -> 'HailTraceScraper':
        try:
            await self.init()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @property
    def page(self):
        return self.engine.page

    async def init(self):
        page = await self.engine.initialize()
        verbose = self.config.verbose

        self.locator = ElementLocator(page, self.config.delay, verbose)
        self.load_detector = LoadDetector(page, self.config.load_poll_ms, verbose)
        self.orchestrator = SearchOrchestrator(
            self.engine, self.config, locator=self.locator, load_detector=self.load_detector
        )
        self.extractor = StormDataExtractor(page, capture=self.capture, verbose=verbose)
        self.inspector = PageInspector(page)

    async def login(self):
        if self.credentials is None:
            self.credentials = get_credentials()
        await self.engine.login(self.credentials)

    async def _ensure_logged_in(self):
        if not self.engine.is_logged_in:
            await self.login()

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    async def search_address(self, address: str) -> ExtractionResult:
        await self._ensure_logged_in()
        self.last_outcome = await self.orchestrator.search_address(address)
        self._report_outcome()
        return await self.extract()

    async def search_coordinates(self, lat: float, lng: float) -> ExtractionResult:
        await self._ensure_logged_in()
        self.last_outcome = await self.orchestrator.search_coordinates(lat, lng)
        self._report_outcome()
        return await self.extract()

    async def search_territory(self, territory: str) -> ExtractionResult:
        await self._ensure_logged_in()
        self.last_outcome = await self.orchestrator.search_territory(territory)
        self._report_outcome()
        return await self.extract()

    def _report_outcome(self):
        outcome = self.last_outcome
        if outcome.degraded:
            print("⚠️ Search did not complete, extracting whatever the page shows")
        elif not outcome.loaded:
            print("⚠️ Results may be incomplete (load wait timed out)")

    async def extract(self) -> ExtractionResult:
        await asyncio.sleep(self.config.delay(self.config.page_settle_ms))
        return await self.extractor.extract()

    async def open_dashboard(self) -> Optional[str]:
        """Log in and land on the maps page without searching."""
        await self._ensure_logged_in()
        await self.engine.goto(self.config.maps_url)
        await asyncio.sleep(self.config.delay(self.config.page_settle_ms))
        return await self.engine.screenshot('hailtrace-dashboard.png')

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    async def download_report(self) -> Optional[str]:
        """
        Click the report control and save the download.

        Returns:
            Saved file path, or None when no control or no download appeared
        """
        print("📥 Attempting to download report...")

        located = await self.locator.locate(report_button_target())
        if not located.success:
            print("⚠️ No download button found")
            return None

        wait_ms = int(self.config.delay(self.config.download_wait_ms) * 1000)
        try:
            async with self.page.expect_download(timeout=wait_ms) as download_info:
                await located.value.click()
            download = await download_info.value
            path = self.config.output_path(download.suggested_filename)
            await download.save_as(path)
        except PlaywrightError as e:
            print(f"⚠️ No report downloaded: {e}")
            return None

        print(f"✅ Downloaded report: {path}")
        return path

    async def screenshot(self, filename: str) -> Optional[str]:
        return await self.engine.screenshot(filename)

    async def debug_page_structure(self) -> Dict:
        return await self.inspector.inspect()

    def dump_api_calls(self):
        self.capture.dump()

    def save_result(self, result: ExtractionResult, filename: str = None) -> str:
        filename = filename or f"hailtrace-data-{timestamp_ms()}.json"
        return self.storage.save_result(result, self.config.output_path(filename))

    async def close(self):
        await self.engine.close()
