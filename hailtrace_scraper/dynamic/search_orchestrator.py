"""Address / coordinate / territory search on the HailTrace maps page.

Address search state machine:

    IDLE → INPUT_LOCATED → TYPED → AWAITING_AUTOCOMPLETE → SELECTED
         → AWAITING_RESULTS → DONE

FAILED is absorbing. Reaching it is not fatal: the caller still extracts
whatever the page currently shows.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError

from ..core.config import ScraperConfig
from ..core.exceptions import LocationExhausted
from ..utils.url_utils import URLUtils
from .element_locator import ElementLocator
from .load_detector import LoadDetector
from .targets import (
    autocomplete_item_target,
    place_dropdown_target,
    places_checkbox_target,
    search_input_target,
    territory_option_target,
)


class SearchState(Enum):
    IDLE = 'idle'
    INPUT_LOCATED = 'input_located'
    TYPED = 'typed'
    AWAITING_AUTOCOMPLETE = 'awaiting_autocomplete'
    SELECTED = 'selected'
    AWAITING_RESULTS = 'awaiting_results'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class SearchOutcome:
    """How far the search got, and which strategies carried it."""
    state: SearchState
    history: List[SearchState] = field(default_factory=list)
    input_strategy: Optional[str] = None
    selection_strategy: Optional[str] = None
    keyboard_fallback: bool = False
    loaded: bool = False

    @property
    def degraded(self) -> bool:
        return self.state == SearchState.FAILED


class SearchOrchestrator:
    """
    Drives one search end-to-end on an initialized PlaywrightEngine.

    Args:
        engine: session owning the page, navigation and screenshots
        config: scraper configuration (delays, timeouts, retries)
        locator: ElementLocator bound to the engine's page
        load_detector: LoadDetector bound to the engine's page
    """

    def __init__(self, engine, config: ScraperConfig,
                 locator: ElementLocator = None, load_detector: LoadDetector = None):
        self.engine = engine
        self.config = config
        self.locator = locator or ElementLocator(engine.page, config.delay, config.verbose)
        self.load_detector = load_detector or LoadDetector(
            engine.page, config.load_poll_ms, config.verbose
        )
        self.state = SearchState.IDLE
        self.history: List[SearchState] = [SearchState.IDLE]

    @property
    def page(self):
        return self.engine.page

    def _reset(self):
        self.state = SearchState.IDLE
        self.history = [SearchState.IDLE]

    def _transition(self, state: SearchState):
        self.state = state
        self.history.append(state)
        if self.config.verbose:
            print(f"  [SEARCH] → {state.value}")

    def _outcome(self, **kwargs) -> SearchOutcome:
        return SearchOutcome(state=self.state, history=list(self.history), **kwargs)

    async def _pause(self, ms: int):
        await asyncio.sleep(self.config.delay(ms))

    # ------------------------------------------------------------------
    # Address search
    # ------------------------------------------------------------------

    async def search_address(self, address: str) -> SearchOutcome:
        self._reset()
        print(f"🔍 Searching for address: {address}")

        await self.engine.goto(self.config.maps_url)
        await self._pause(self.config.page_settle_ms)
        await self.engine.screenshot('before-search.png')

        if self.config.enable_places_search:
            await self.enable_places_search()

        search_input = None
        input_strategy = None

        retries = max(1, self.config.search_retries)
        for attempt in range(1, retries + 1):
            try:
                located = await self.locator.require(search_input_target())
            except LocationExhausted as e:
                print(f"⚠️ {e}")
                self._transition(SearchState.FAILED)
                return self._outcome()

            search_input = located.value
            input_strategy = located.strategy
            self._transition(SearchState.INPUT_LOCATED)

            try:
                await self._type_query(search_input, address)
                break
            except PlaywrightError as e:
                print(f"  ⚠ Typing failed (attempt {attempt}/{retries}): {e}")
                if attempt == retries:
                    self._transition(SearchState.FAILED)
                    return self._outcome(input_strategy=input_strategy)
                self._transition(SearchState.IDLE)

        await self.engine.screenshot('after-typing.png')

        selection_strategy, keyboard_fallback = await self._select_suggestion(search_input)

        loaded = await self._await_results('after-search.png')
        return self._outcome(
            input_strategy=input_strategy,
            selection_strategy=selection_strategy,
            keyboard_fallback=keyboard_fallback,
            loaded=loaded,
        )

    async def _type_query(self, search_input, text: str):
        """Clear the input (triple-click + Backspace) and type slowly enough for autocomplete."""
        await search_input.click()
        await self._pause(300)
        await search_input.click(click_count=3)
        await self._pause(100)
        await self.page.keyboard.press('Backspace')
        await self._pause(200)

        key_delay = int(self.config.delay(self.config.typing_delay_ms) * 1000)
        await search_input.type(text, delay=key_delay)
        print(f"  Typed: {text}")
        self._transition(SearchState.TYPED)

    async def _select_suggestion(self, search_input):
        """Click the first autocomplete item, falling back to ArrowDown + Enter."""
        self._transition(SearchState.AWAITING_AUTOCOMPLETE)
        await self._pause(self.config.autocomplete_wait_ms)
        await self.engine.screenshot('autocomplete.png')

        result = await self.locator.locate(
            autocomplete_item_target(self.config.autocomplete_timeout_ms)
        )

        keyboard_fallback = not result.success
        if keyboard_fallback:
            print("⚠️ Autocomplete selection failed, trying keyboard fallback")
            await search_input.press('ArrowDown')
            await self._pause(300)
            await search_input.press('Enter')

        self._transition(SearchState.SELECTED)
        return result.strategy, keyboard_fallback

    async def _await_results(self, screenshot_name: str) -> bool:
        self._transition(SearchState.AWAITING_RESULTS)
        await self._pause(self.config.results_settle_ms)

        loaded = await self.load_detector.wait_for_load(self.config.load_timeout_ms)
        await self.engine.screenshot(screenshot_name)

        self._transition(SearchState.DONE)
        return loaded

    async def enable_places_search(self) -> bool:
        """Tick the "Search for places" toggle. Failure only degrades the search."""
        result = await self.locator.locate(places_checkbox_target())
        if not result.success:
            print("  ⚠ Could not enable place search, continuing without it")
        return result.success

    # ------------------------------------------------------------------
    # Coordinate search
    # ------------------------------------------------------------------

    async def search_coordinates(self, lat: float, lng: float) -> SearchOutcome:
        """Encode the coordinates into the maps URL; no typing or autocomplete."""
        self._reset()
        print(f"🔍 Searching coordinates: {lat}, {lng}")

        url = URLUtils.coordinates_url(self.config.maps_url, lat, lng)
        await self.engine.goto(url)
        await self._pause(self.config.page_settle_ms)
        await self.engine.screenshot('coordinates-initial.png')

        loaded = await self._await_results('coordinates-loaded.png')
        await self._pause(self.config.page_settle_ms)
        return self._outcome(loaded=loaded)

    # ------------------------------------------------------------------
    # Territory search
    # ------------------------------------------------------------------

    async def search_territory(self, territory: str) -> SearchOutcome:
        """Pick a saved territory from the "Select a place" dropdown."""
        self._reset()
        print(f"🔍 Selecting territory: {territory}")

        await self.engine.goto(self.config.maps_url)
        await self._pause(self.config.page_settle_ms)
        await self.engine.screenshot('before-search.png')

        dropdown = await self.locator.locate(place_dropdown_target())
        if not dropdown.success:
            self._transition(SearchState.FAILED)
            return self._outcome()
        self._transition(SearchState.INPUT_LOCATED)

        option = await self.locator.locate(territory_option_target(territory))
        if not option.success:
            self._transition(SearchState.FAILED)
            return self._outcome(input_strategy=dropdown.strategy)
        self._transition(SearchState.SELECTED)

        loaded = await self._await_results('after-search.png')
        return self._outcome(
            input_strategy=dropdown.strategy,
            selection_strategy=option.strategy,
            loaded=loaded,
        )
