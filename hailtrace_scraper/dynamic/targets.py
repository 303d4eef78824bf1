"""Location targets for the HailTrace maps page."""

from .element_locator import (
    LocationTarget,
    Strategy,
    anchor_click_strategy,
    dispatch_strategy,
    element_visible,
    keyboard_strategy,
    scan_click_strategy,
    selector_strategy,
    text_strategy,
)

PLACES_LABEL = 'Search for places'
PLACE_DROPDOWN_LABEL = 'Select a place'

SEARCH_INPUT_SELECTORS = [
    'input[placeholder="Search for Address"]',
    'input[placeholder*="Address"]',
    'input[placeholder*="address"]',
    'input[placeholder*="Search"]',
    'input[placeholder*="place"]',
    'input[placeholder*="Place"]',
    'input[type="search"]',
    '.search-input input',
    '[class*="search"] input',
]

GENERIC_INPUT_SELECTORS = ['input[type="text"]']

# Anchors used when an element has no DOM hook of its own
SEARCH_ANCHOR_SELECTORS = [
    'input[placeholder*="Address"]',
    'input[placeholder*="Search"]',
]

AUTOCOMPLETE_SELECTORS = [
    '[class*="autocomplete"] [class*="item"]',
    '[class*="autocomplete"] [class*="option"]',
    '[class*="suggestion"]',
    '[class*="Suggestion"]',
    '.dropdown-item',
    'li[role="option"]',
    '[role="listbox"] [role="option"]',
    '[data-testid*="suggestion"]',
    '[data-testid*="autocomplete"]',
]

REPORT_SELECTORS = [
    'button:has-text("Report")',
    'button:has-text("Download")',
    'button:has-text("PDF")',
    '[class*="download"]',
    '[class*="report"]',
]


# ---------------------------------------------------------------------------
# Search input
# ---------------------------------------------------------------------------

SCAN_INPUT_JS = """
() => {
    for (const input of document.querySelectorAll('input')) {
        const placeholder = (input.placeholder || '').toLowerCase();
        if (placeholder.includes('address') || placeholder.includes('search') || placeholder.includes('place')) {
            return input;
        }
    }
    return null;
}
"""


async def _scan_search_input(page):
    handle = await page.evaluate_handle(SCAN_INPUT_JS)
    return handle.as_element()


def search_input_target() -> LocationTarget:
    return LocationTarget(
        description='search input',
        strategies=[
            selector_strategy(SEARCH_INPUT_SELECTORS, name='placeholder selectors', click=False),
            Strategy(name='placeholder scan', attempt=_scan_search_input),
            selector_strategy(GENERIC_INPUT_SELECTORS, name='generic text input', click=False),
        ],
        verify=element_visible,
        settle_ms=0,
    )


# ---------------------------------------------------------------------------
# "Search for places" checkbox
# ---------------------------------------------------------------------------

IS_CHECKED_JS = """
(label) => {
    for (const cb of document.querySelectorAll('input[type="checkbox"]')) {
        if (cb.closest('label')?.textContent?.includes(label) ||
            cb.parentElement?.textContent?.includes(label)) {
            return cb.checked;
        }
    }

    for (const cb of document.querySelectorAll('[role="checkbox"]')) {
        const nearText = cb.closest('label')?.textContent ||
                         cb.parentElement?.textContent ||
                         cb.nextElementSibling?.textContent || '';
        if (nearText.includes(label)) {
            return cb.getAttribute('aria-checked') === 'true';
        }
    }

    for (const el of document.querySelectorAll('*')) {
        if (el.textContent?.includes(label) && el.children.length <= 2) {
            const container = el.closest('label, div, span');
            if (!container) continue;
            const cls = String(container.className || '');
            if (/checked|Checked|active|selected/.test(cls)) return true;
            if (container.querySelector('input[type="checkbox"]')?.checked) return true;
        }
    }

    // The Places overlay being open means the toggle is effectively on
    const pac = document.querySelector('.pac-container');
    return !!(pac && pac.style.display !== 'none');
}
"""

ATTRIBUTE_CLICK_JS = """
(label) => {
    const el = document.querySelector(`[aria-label*="${label}"]`) ||
               document.querySelector(`[title*="${label}"]`);
    if (!el) return null;
    el.click();
    return el.getAttribute('aria-label') ? 'aria-label' : 'title';
}
"""

NEAR_CHECKBOX_JS = """
(label) => {
    for (const cb of document.querySelectorAll('input[type="checkbox"], [role="checkbox"]')) {
        const rect = cb.getBoundingClientRect();
        if (rect.width === 0 || rect.height === 0) continue;
        const nearby = document.elementFromPoint(rect.x + rect.width + 10, rect.y + rect.height / 2);
        if (nearby?.textContent?.includes(label) ||
            cb.parentElement?.textContent?.includes(label) ||
            cb.closest('label')?.textContent?.includes(label)) {
            cb.click();
            return true;
        }
    }
    return false;
}
"""


def _js_strategy(name: str, script: str, arg) -> Strategy:
    async def attempt(page):
        return await page.evaluate(script, arg)
    return Strategy(name=name, attempt=attempt)


def places_checkbox_target(label: str = PLACES_LABEL) -> LocationTarget:
    async def verify(page, _value):
        return bool(await page.evaluate(IS_CHECKED_JS, label))

    return LocationTarget(
        description=f'"{label}" checkbox',
        strategies=[
            text_strategy(label),
            _js_strategy('aria-label/title', ATTRIBUTE_CLICK_JS, label),
            scan_click_strategy([label], exact=True, closest='label', name='label scan'),
            _js_strategy('checkbox near label', NEAR_CHECKBOX_JS, label),
            anchor_click_strategy(SEARCH_ANCHOR_SELECTORS, offset=(20, 25), name='below search input'),
            dispatch_strategy(near_text=label),
            keyboard_strategy(SEARCH_ANCHOR_SELECTORS, keys=('Tab', 'Space'), name='Tab + Space'),
        ],
        verify=verify,
    )


# ---------------------------------------------------------------------------
# "Select a place" dropdown and territory options
# ---------------------------------------------------------------------------

DROPDOWN_OPEN_JS = """
() => {
    const visible = (el) => {
        const r = el.getBoundingClientRect();
        return r.width > 0 && r.height > 0;
    };
    const open = document.querySelectorAll(
        '[role="listbox"], [role="option"], [aria-expanded="true"], [class*="menu"] [class*="option"]'
    );
    return Array.from(open).some(visible);
}
"""


async def _dropdown_open(page, _value=None) -> bool:
    return bool(await page.evaluate(DROPDOWN_OPEN_JS))


def place_dropdown_target(label: str = PLACE_DROPDOWN_LABEL) -> LocationTarget:
    return LocationTarget(
        description=f'"{label}" dropdown',
        strategies=[
            text_strategy(label),
            selector_strategy(
                [f'[aria-label*="{label}"]', '[placeholder*="Select"]', '[class*="select"]'],
                name='dropdown selectors',
            ),
            scan_click_strategy(
                [label], exact=True,
                closest='div, button, [role="button"], [class*="select"]',
            ),
            anchor_click_strategy(
                ['[class*="select"]', '[class*="dropdown"]'],
                offset=(-20, 0), edge='right-middle', name='dropdown chevron',
            ),
        ],
        verify=_dropdown_open,
    )


def territory_option_target(territory: str) -> LocationTarget:
    async def verify(page, _value):
        if await _dropdown_open(page):
            return False
        body_text = await page.evaluate("() => document.body.innerText")
        return territory.lower() in (body_text or '').lower()

    return LocationTarget(
        description=f'territory "{territory}"',
        strategies=[
            text_strategy(territory, exact=True),
            selector_strategy(
                [f'[role="option"]:has-text("{territory}")', f'li:has-text("{territory}")'],
                name='option selectors',
            ),
            scan_click_strategy([territory], exact=True),
            keyboard_strategy(keys=('Enter',), text=territory, name='type + Enter'),
        ],
        verify=verify,
    )


# ---------------------------------------------------------------------------
# Autocomplete suggestions
# ---------------------------------------------------------------------------

SUGGESTION_ITEM_SELECTOR = ', '.join(
    ['.pac-container .pac-item', '[role="listbox"] [role="option"]'] + AUTOCOMPLETE_SELECTORS
)

SUGGESTIONS_VISIBLE_JS = """
(selector) => Array.from(document.querySelectorAll(selector)).some(el => {
    const r = el.getBoundingClientRect();
    return r.width > 0 && r.height > 0;
})
"""

FIRST_LIST_ITEM_JS = """
() => {
    const visible = (el) => {
        const r = el.getBoundingClientRect();
        return r.width > 0 && r.height > 0;
    };
    const lists = document.querySelectorAll(
        '.pac-container, [role="listbox"], [class*="autocomplete"] ul, [class*="suggestion"] ul'
    );
    for (const list of lists) {
        const item = Array.from(list.querySelectorAll('li, [role="option"], .pac-item')).find(visible);
        if (item) {
            item.click();
            return true;
        }
    }
    return false;
}
"""


async def _suggestions_visible(page) -> bool:
    return bool(await page.evaluate(SUGGESTIONS_VISIBLE_JS, SUGGESTION_ITEM_SELECTOR))


def _while_suggestions_open(strategy: Strategy, wait_for: str = None, wait_timeout: int = 5000) -> Strategy:
    """Only act when a suggestion is on screen, so verification sees a real close."""

    async def attempt(page):
        if wait_for:
            await page.wait_for_selector(wait_for, state='visible', timeout=wait_timeout)
        if not await _suggestions_visible(page):
            return None
        return await strategy.attempt(page)

    return Strategy(name=strategy.name, attempt=attempt)


def autocomplete_item_target(timeout_ms: int = 5000) -> LocationTarget:
    async def verify(page, _value):
        return not await _suggestions_visible(page)

    return LocationTarget(
        description='first autocomplete suggestion',
        strategies=[
            _while_suggestions_open(
                selector_strategy(['.pac-container .pac-item'], name='Google Places item'),
                wait_for='.pac-container .pac-item',
                wait_timeout=timeout_ms,
            ),
            _while_suggestions_open(selector_strategy(AUTOCOMPLETE_SELECTORS, name='custom suggestion')),
            _while_suggestions_open(_js_strategy('first list item', FIRST_LIST_ITEM_JS, None)),
        ],
        verify=verify,
    )


# ---------------------------------------------------------------------------
# Report download
# ---------------------------------------------------------------------------

def report_button_target() -> LocationTarget:
    return LocationTarget(
        description='report download button',
        strategies=[
            selector_strategy(REPORT_SELECTORS, name='report selectors', click=False),
            Strategy(name='report text', attempt=_report_by_text),
        ],
        verify=element_visible,
        settle_ms=0,
    )


async def _report_by_text(page):
    for label in ('Download Report', 'Report', 'PDF'):
        locator = page.get_by_role('button', name=label)
        if await locator.count():
            return await locator.first.element_handle()
    return None
