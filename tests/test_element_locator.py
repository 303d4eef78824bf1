"""Tests for verification-gated element location."""

from unittest.mock import AsyncMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from hailtrace_scraper.core.exceptions import LocationExhausted
from hailtrace_scraper.dynamic import targets
from hailtrace_scraper.dynamic.element_locator import (
    DISPATCH_JS,
    SCAN_CLICK_JS,
    ElementLocator,
    LocationTarget,
    Strategy,
    anchor_click_strategy,
    dispatch_strategy,
    element_visible,
    keyboard_strategy,
    selector_strategy,
)
from hailtrace_scraper.dynamic.targets import (
    autocomplete_item_target,
    places_checkbox_target,
    search_input_target,
)

from .conftest import make_element


def strategy(name, result=True, error=None):
    return Strategy(name=name, attempt=AsyncMock(return_value=result, side_effect=error))


@pytest.fixture
def locator(page):
    return ElementLocator(page, delay=lambda ms: 0, verbose=False)


class TestLocate:

    @pytest.mark.asyncio
    async def test_unverified_action_is_not_success(self, locator):
        target = LocationTarget(
            description='checkbox',
            strategies=[strategy('click label')],
            verify=AsyncMock(return_value=False),
        )

        result = await locator.locate(target)

        assert result.success is False
        assert result.strategy is None
        assert result.attempts == ['click label']

    @pytest.mark.asyncio
    async def test_first_verified_strategy_wins(self, locator):
        first = strategy('first', result='clicked')
        second = strategy('second', result='clicked')
        third = strategy('third', result='clicked')
        verify = AsyncMock(side_effect=[False, True])

        result = await locator.locate(LocationTarget('toggle', [first, second, third], verify))

        assert result.success is True
        assert result.strategy == 'second'
        assert result.attempts == ['first', 'second']
        third.attempt.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_playwright_errors_recorded_and_chain_continues(self, locator):
        broken = strategy('broken', error=PlaywrightError("Element is detached"))
        working = strategy('working', result='ok')

        result = await locator.locate(
            LocationTarget('button', [broken, working], AsyncMock(return_value=True))
        )

        assert result.success is True
        assert result.strategy == 'working'
        assert result.errors == {'broken': 'Element is detached'}

    @pytest.mark.asyncio
    async def test_strategies_that_did_not_act_skip_verification(self, locator):
        verify = AsyncMock(return_value=True)
        target = LocationTarget('input', [strategy('none', result=None), strategy('empty', result=False)], verify)

        result = await locator.locate(target)

        assert result.success is False
        verify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_require_raises_when_exhausted(self, locator):
        target = LocationTarget('search input', [strategy('a', result=None), strategy('b', result=None)],
                                AsyncMock(return_value=True))

        with pytest.raises(LocationExhausted) as exc_info:
            await locator.require(target)

        assert exc_info.value.target == 'search input'
        assert exc_info.value.attempts == ['a', 'b']


class TestStrategies:

    @pytest.mark.asyncio
    async def test_selector_strategy_clicks_first_visible_match(self, page):
        hidden = make_element(visible=False)
        shown = make_element()
        page.query_selector.side_effect = [hidden, None, shown]

        element = await selector_strategy(['#a', '#b', '#c']).attempt(page)

        assert element is shown
        shown.click.assert_awaited_once()
        hidden.click.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_selector_strategy_without_click(self, page):
        shown = make_element()
        page.query_selector.return_value = shown

        element = await selector_strategy(['input'], click=False).attempt(page)

        assert element is shown
        shown.click.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_anchor_click_below_element(self, page):
        anchor = make_element()
        anchor.bounding_box.return_value = {'x': 100, 'y': 50, 'width': 300, 'height': 40}
        page.query_selector.return_value = anchor

        point = await anchor_click_strategy(['input'], offset=(20, 25)).attempt(page)

        assert point == (120, 115)
        page.mouse.click.assert_awaited_once_with(120, 115)

    @pytest.mark.asyncio
    async def test_anchor_click_right_middle(self, page):
        anchor = make_element()
        anchor.bounding_box.return_value = {'x': 100, 'y': 50, 'width': 300, 'height': 40}
        page.query_selector.return_value = anchor

        point = await anchor_click_strategy(['select'], offset=(-20, 0), edge='right-middle').attempt(page)

        assert point == (380, 70)

    @pytest.mark.asyncio
    async def test_element_visible_rejects_non_elements(self, page):
        assert await element_visible(page, True) is False
        assert await element_visible(page, make_element()) is True

    @pytest.mark.asyncio
    async def test_dispatch_strategy_targets_checkbox_near_label(self, page):
        page.evaluate.return_value = True

        acted = await dispatch_strategy(near_text='Search for places').attempt(page)

        assert acted is True
        page.evaluate.assert_awaited_once_with(DISPATCH_JS, ['input[type="checkbox"]', 'Search for places'])

    def test_dispatch_script_sets_checked_and_fires_events(self):
        assert 'el.checked = true' in DISPATCH_JS
        assert "new Event('input', { bubbles: true })" in DISPATCH_JS
        assert "new Event('change', { bubbles: true })" in DISPATCH_JS

    @pytest.mark.asyncio
    async def test_dispatch_without_candidate_is_no_match(self, page, locator):
        page.evaluate.return_value = False
        verify = AsyncMock(return_value=True)

        result = await locator.locate(LocationTarget('checkbox', [dispatch_strategy(near_text='x')], verify))

        assert result.success is False
        verify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_keyboard_without_focus_anchor_does_nothing(self, page):
        page.query_selector.return_value = None

        acted = await keyboard_strategy(['input.search'], key_delay_ms=0).attempt(page)

        assert acted is None
        page.keyboard.press.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_keyboard_focuses_first_anchor_then_presses_keys(self, page):
        anchor = make_element()
        page.query_selector.side_effect = [None, anchor]

        acted = await keyboard_strategy(['#missing', '#search'], keys=('Tab', 'Space'), key_delay_ms=0).attempt(page)

        assert acted is True
        anchor.focus.assert_awaited_once()
        assert [c.args[0] for c in page.keyboard.press.await_args_list] == ['Tab', 'Space']

    @pytest.mark.asyncio
    async def test_keyboard_types_text_before_keys(self, page):
        acted = await keyboard_strategy(keys=('Enter',), text='DMV', key_delay_ms=0).attempt(page)

        assert acted is True
        page.keyboard.type.assert_awaited_once_with('DMV')
        page.keyboard.press.assert_awaited_once_with('Enter')


def places_page(page, dispatch_result):
    """Page where every checkbox strategy before event dispatch finds nothing."""
    page.get_by_text.return_value.first.click.side_effect = PlaywrightTimeoutError("Timeout 3000ms exceeded")
    anchor = make_element()
    anchor.bounding_box.return_value = None
    page.query_selector.return_value = anchor

    replies = {
        targets.ATTRIBUTE_CLICK_JS: None,
        SCAN_CLICK_JS: None,
        targets.NEAR_CHECKBOX_JS: False,
        DISPATCH_JS: dispatch_result,
        targets.IS_CHECKED_JS: True,
    }

    async def evaluate(script, arg=None):
        return replies[script]

    page.evaluate.side_effect = evaluate
    return anchor


class TestLateStrategies:

    @pytest.mark.asyncio
    async def test_only_event_dispatch_checks_the_box(self, page, locator):
        places_page(page, dispatch_result=True)

        result = await locator.locate(places_checkbox_target())

        assert result.success is True
        assert result.strategy == 'event dispatch'
        assert len(result.attempts) == 6
        page.keyboard.press.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_only_keyboard_checks_the_box(self, page, locator):
        anchor = places_page(page, dispatch_result=False)

        result = await locator.locate(places_checkbox_target())

        assert result.success is True
        assert result.strategy == 'Tab + Space'
        anchor.focus.assert_awaited_once()
        assert [c.args[0] for c in page.keyboard.press.await_args_list] == ['Tab', 'Space']


class TestTargets:

    @pytest.mark.asyncio
    async def test_search_input_found_by_placeholder(self, page, locator):
        search_input = make_element()
        page.query_selector.return_value = search_input

        result = await locator.require(search_input_target())

        assert result.value is search_input
        assert result.strategy == 'placeholder selectors'
        search_input.click.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_places_checkbox_falls_through_until_checked(self, page, locator):
        # Text click "works" but leaves the box unchecked; the JS attribute
        # click finds nothing; the label scan finally checks it.
        calls = []

        async def evaluate(script, arg=None):
            calls.append(script)
            if 'aria-label*=' in script:
                return None
            if 'Deepest match only' in script:
                return 'Search for places'
            # verification
            return len(calls) > 2

        page.evaluate.side_effect = evaluate

        result = await locator.locate(places_checkbox_target())

        assert result.success is True
        assert result.strategy == 'label scan'
        assert result.attempts[:3] == ['text "Search for places"', 'aria-label/title', 'label scan']


def suggestion_page(page, visible_states, stale_list=False):
    """`visible_states` are successive answers to "is a suggestion on screen"."""
    states = iter(visible_states)
    seen = []

    async def evaluate(script, arg=None):
        seen.append(script)
        if script is targets.SUGGESTIONS_VISIBLE_JS:
            return next(states)
        if script is targets.FIRST_LIST_ITEM_JS:
            return stale_list
        return None

    page.evaluate.side_effect = evaluate
    return seen


class TestAutocompleteTarget:

    @pytest.mark.asyncio
    async def test_no_overlay_means_no_selection(self, page, locator):
        page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 5000ms exceeded")
        leftover = make_element()
        page.query_selector.return_value = leftover
        seen = suggestion_page(page, [False, False], stale_list=True)

        result = await locator.locate(autocomplete_item_target(timeout_ms=10))

        assert result.success is False
        assert targets.FIRST_LIST_ITEM_JS not in seen
        leftover.click.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_visible_suggestion_clicked_and_closed(self, page, locator):
        item = make_element()
        page.query_selector.return_value = item
        suggestion_page(page, [True, False])

        result = await locator.locate(autocomplete_item_target(timeout_ms=10))

        assert result.success is True
        assert result.strategy == 'Google Places item'
        item.click.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_overlay_still_open_after_click_is_not_success(self, page, locator):
        page.query_selector.return_value = make_element()
        suggestion_page(page, [True] * 6, stale_list=True)

        result = await locator.locate(autocomplete_item_target(timeout_ms=10))

        assert result.success is False
        assert result.attempts == ['Google Places item', 'custom suggestion', 'first list item']
