"""Verification-gated element location.

The dashboard's controls are custom-styled and its layout shifts between
deployments, so no single selector can be trusted. A LocationTarget holds an
ordered list of strategies plus one verification check:

    1. selector / visible-text match
    2. in-page scan-and-click by text content
    3. coordinate click relative to an anchor element
    4. state mutation + synthetic input/change events
    5. keyboard navigation (Tab, Space/Enter)

A strategy that acts but leaves the page unchanged fails verification and
the chain moves on. Exhausting the chain is a normal outcome, not an error.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from playwright.async_api import Error as PlaywrightError

from ..core.exceptions import LocationExhausted

Attempt = Callable[[Any], Awaitable[Any]]
Verifier = Callable[[Any, Any], Awaitable[bool]]


@dataclass
class Strategy:
    """One way of reaching a target. `attempt` returns a truthy value if it acted."""
    name: str
    attempt: Attempt


@dataclass
class LocationTarget:
    """Semantic UI target: what to reach, how to try, how to confirm."""
    description: str
    strategies: List[Strategy]
    verify: Verifier
    settle_ms: int = 500


@dataclass
class LocateResult:
    target: str
    success: bool
    strategy: Optional[str] = None
    value: Any = None
    attempts: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)


class ElementLocator:
    """
    Runs a target's strategy chain until one passes verification.

    Args:
        page: Playwright page
        delay: converts a settle time in ms to seconds (slow mode aware)
        verbose: print each attempt
    """

    def __init__(self, page, delay: Callable[[int], float] = None, verbose: bool = True):
        self.page = page
        self.delay = delay or (lambda ms: ms / 1000)
        self.verbose = verbose

    def _log(self, message: str):
        if self.verbose:
            print(message)

    async def locate(self, target: LocationTarget) -> LocateResult:
        result = LocateResult(target=target.description, success=False)

        for strategy in target.strategies:
            result.attempts.append(strategy.name)

            try:
                value = await strategy.attempt(self.page)
            except PlaywrightError as e:
                result.errors[strategy.name] = str(e).splitlines()[0] if str(e) else repr(e)
                self._log(f"      ✗ {target.description} [{strategy.name}]: {result.errors[strategy.name]}")
                continue

            if not value:
                self._log(f"      → {target.description} [{strategy.name}]: no match")
                continue

            if target.settle_ms:
                await asyncio.sleep(self.delay(target.settle_ms))

            try:
                verified = await target.verify(self.page, value)
            except PlaywrightError as e:
                result.errors[strategy.name] = f"verification failed: {e}"
                verified = False

            if verified:
                result.success = True
                result.strategy = strategy.name
                result.value = value
                self._log(f"    ✓ {target.description} via {strategy.name}")
                return result

            self._log(f"      ⚠ {target.description} [{strategy.name}]: acted but state unchanged")

        self._log(f"    ✗ {target.description}: all {len(result.attempts)} strategies exhausted")
        return result

    async def require(self, target: LocationTarget) -> LocateResult:
        """Like locate(), but raise LocationExhausted when nothing verified."""
        result = await self.locate(target)
        if not result.success:
            raise LocationExhausted(target.description, result.attempts)
        return result


# ---------------------------------------------------------------------------
# Strategy factories
# ---------------------------------------------------------------------------

def selector_strategy(
    selectors: Sequence[str],
    name: str = 'selector',
    click: bool = True,
    wait_for: str = None,
    wait_timeout: int = 5000,
) -> Strategy:
    """First visible match among `selectors`; clicked unless click=False."""

    async def attempt(page):
        if wait_for:
            await page.wait_for_selector(wait_for, state='visible', timeout=wait_timeout)

        for selector in selectors:
            element = await page.query_selector(selector)
            if element and await element.is_visible():
                if click:
                    await element.click()
                return element
        return None

    return Strategy(name=name, attempt=attempt)


def text_strategy(text: str, exact: bool = False, timeout: int = 3000, name: str = None) -> Strategy:
    """Click the first element whose visible text matches."""

    async def attempt(page):
        await page.get_by_text(text, exact=exact).first.click(timeout=timeout)
        return True

    return Strategy(name=name or f'text "{text}"', attempt=attempt)


SCAN_CLICK_JS = """
([texts, exact, closest]) => {
    const matches = (el) => {
        const t = (el.textContent || '').trim();
        return texts.some(x => exact ? t === x : t.includes(x));
    };
    for (const el of document.querySelectorAll('body *')) {
        if (!matches(el)) continue;
        // Deepest match only, so containers like <main> are skipped
        if (Array.from(el.children).some(matches)) continue;
        const target = (closest && el.closest(closest)) || el;
        target.click();
        return (el.textContent || '').trim().slice(0, 80) || true;
    }
    return null;
}
"""


def scan_click_strategy(
    texts: Sequence[str],
    exact: bool = True,
    closest: str = None,
    name: str = 'scan-and-click',
) -> Strategy:
    """Scan the DOM for an element by text and click it (or its `closest` ancestor)."""

    async def attempt(page):
        return await page.evaluate(SCAN_CLICK_JS, [list(texts), exact, closest])

    return Strategy(name=name, attempt=attempt)


def anchor_click_strategy(
    anchor_selectors: Sequence[str],
    offset: Tuple[float, float],
    edge: str = 'bottom-left',
    name: str = 'anchor click',
) -> Strategy:
    """
    Mouse click at an offset from an anchor element's bounding box.

    edge: 'bottom-left' measures from (left, bottom),
          'right-middle' from (right, vertical centre).
    """

    async def attempt(page):
        for selector in anchor_selectors:
            anchor = await page.query_selector(selector)
            if not anchor:
                continue
            box = await anchor.bounding_box()
            if not box:
                continue

            if edge == 'right-middle':
                x = box['x'] + box['width'] + offset[0]
                y = box['y'] + box['height'] / 2 + offset[1]
            else:
                x = box['x'] + offset[0]
                y = box['y'] + box['height'] + offset[1]

            await page.mouse.click(x, y)
            return (x, y)
        return None

    return Strategy(name=name, attempt=attempt)


DISPATCH_JS = """
([selector, nearText]) => {
    const candidates = Array.from(document.querySelectorAll(selector));
    const related = (el) => !nearText ||
        (el.closest('label')?.textContent || '').includes(nearText) ||
        (el.parentElement?.textContent || '').includes(nearText);
    const el = candidates.find(related) || (nearText ? null : candidates[0]);
    if (!el) return false;
    el.checked = true;
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
    return true;
}
"""


def dispatch_strategy(
    selector: str = 'input[type="checkbox"]',
    near_text: str = None,
    name: str = 'event dispatch',
) -> Strategy:
    """Set `checked` directly and dispatch input/change for framework listeners."""

    async def attempt(page):
        return await page.evaluate(DISPATCH_JS, [selector, near_text])

    return Strategy(name=name, attempt=attempt)


def keyboard_strategy(
    focus_selectors: Sequence[str] = (),
    keys: Sequence[str] = ('Tab', 'Space'),
    text: str = None,
    key_delay_ms: int = 200,
    name: str = 'keyboard',
) -> Strategy:
    """Focus an anchor (if given), optionally type `text`, then press `keys`."""

    async def attempt(page):
        if focus_selectors:
            for selector in focus_selectors:
                element = await page.query_selector(selector)
                if element:
                    await element.focus()
                    break
            else:
                return None

        if text:
            await page.keyboard.type(text)

        for key in keys:
            await page.keyboard.press(key)
            await asyncio.sleep(key_delay_ms / 1000)
        return True

    return Strategy(name=name, attempt=attempt)


async def element_visible(page, value) -> bool:
    """Verifier for strategies that return an element handle."""
    if not hasattr(value, 'is_visible'):
        return False
    return await value.is_visible()
