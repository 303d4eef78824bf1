"""Detect when asynchronously loaded storm data has settled."""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional

LOAD_STATE_JS = """
() => {
    const skeletons = document.querySelectorAll(
        '[class*="skeleton"], [class*="Skeleton"], ' +
        '[class*="loading"], [class*="Loading"], ' +
        '[class*="spinner"], [class*="Spinner"], ' +
        '[class*="placeholder"], [class*="Placeholder"]'
    );

    const countMatch = document.body.textContent.match(/(\\d+)\\s*events?\\s*found/i);

    let visible = 0;
    document.querySelectorAll('[class*="event"], [class*="Event"], [class*="card"], [class*="Card"]')
        .forEach(card => {
            if (card.offsetParent !== null && card.textContent.length > 50) visible++;
        });

    return {
        hasSkeletons: skeletons.length > 0,
        expectedCount: countMatch ? parseInt(countMatch[1]) : 0,
        visibleCount: visible
    };
}
"""


@dataclass
class LoadState:
    """One poll of the page."""
    has_skeletons: bool
    expected_count: int
    visible_count: int

    @classmethod
    def from_page(cls, data: dict) -> 'LoadState':
        return cls(
            has_skeletons=bool(data.get('hasSkeletons')),
            expected_count=int(data.get('expectedCount') or 0),
            visible_count=int(data.get('visibleCount') or 0),
        )

    @property
    def is_loaded(self) -> bool:
        if not self.has_skeletons:
            return True
        return self.expected_count > 0 and self.visible_count >= self.expected_count * 0.5


class LoadDetector:
    """
    Poll the page until skeleton loaders are gone or enough events are shown.

    A timeout is not an error: callers extract whatever is on the page.
    """

    def __init__(self, page, poll_interval_ms: int = 1000, verbose: bool = True,
                 clock: Callable[[], float] = time.monotonic):
        self.page = page
        self.poll_interval_ms = poll_interval_ms
        self.verbose = verbose
        self.clock = clock
        self.last_state: Optional[LoadState] = None

    async def poll(self) -> LoadState:
        self.last_state = LoadState.from_page(await self.page.evaluate(LOAD_STATE_JS))
        return self.last_state

    async def wait_for_load(self, max_wait_ms: int = 15000) -> bool:
        """
        Returns:
            True once the page looks loaded, False when max_wait_ms elapses
        """
        if self.verbose:
            print("⏳ Waiting for data to load...")

        deadline = self.clock() + max_wait_ms / 1000

        while self.clock() < deadline:
            state = await self.poll()

            if self.verbose:
                print(f"   Skeletons: {state.has_skeletons}, "
                      f"Events found: {state.expected_count}, Visible: {state.visible_count}")

            if state.is_loaded:
                if self.verbose:
                    print("✅ Data appears to be loaded")
                return True

            await asyncio.sleep(self.poll_interval_ms / 1000)

        if self.verbose:
            print("⚠️ Timeout waiting for data load")
        return False
