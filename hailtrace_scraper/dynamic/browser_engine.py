"""Browser session for the HailTrace dashboard."""

import asyncio
import re
from typing import Any, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ..core.config import Credentials, ScraperConfig
from ..core.exceptions import AuthenticationError, NavigationError
from ..utils.url_utils import URLUtils
from .network_capture import NetworkCapture

EMAIL_SELECTORS = [
    'input[type="email"]',
    'input[name="email"]',
    'input[placeholder*="email" i]',
]

PASSWORD_SELECTORS = [
    'input[type="password"]',
    'input[name="password"]',
]

LOGIN_FORM_SELECTOR = 'input[type="email"], input[name="email"], input[placeholder*="email" i]'

LOGIN_TEXT = re.compile(r'^\s*(log\s?in|sign\s?in)\s*$', re.IGNORECASE)

SUBMIT_SELECTORS = [
    'button[type="submit"]',
    'input[type="submit"]',
    'button:has-text("Log In")',
    'button:has-text("Sign In")',
    'button:has-text("Login")',
]

LOGIN_ERROR_SELECTOR = '.error, .alert-danger, [class*="error"]'

SCAN_LOGIN_BUTTON_JS = """
() => {
    for (const btn of document.querySelectorAll('button, input[type="submit"], [role="button"]')) {
        const text = (btn.textContent || btn.value || '').toLowerCase();
        if (text.includes('log in') || text.includes('login') || text.includes('sign in')) {
            btn.click();
            return true;
        }
    }
    return false;
}
"""

VISIBLE_ERROR_JS = """
(selector) => {
    const el = document.querySelector(selector);
    return el ? (el.textContent || '').trim() : null;
}
"""


class PlaywrightEngine:
    """
    Owns the browser, context and page for one run.

    The network capture is attached before the first navigation so that
    nothing the dashboard loads is missed.
    """

    def __init__(self, config: ScraperConfig = None, capture: NetworkCapture = None):
        self.config = config or ScraperConfig()
        self.capture = capture or NetworkCapture()
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None
        self.is_logged_in = False

    async def initialize(self) -> Any:
        """Launch Chromium, open the page and attach the network capture."""
        print("🚀 Launching browser...")
        browser_config = self.config.browser

        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(
            headless=browser_config.headless,
            args=browser_config.launch_args,
        )
        self.context = await self.browser.new_context(
            viewport=browser_config.viewport,
            user_agent=browser_config.user_agent,
            accept_downloads=True,
        )
        await self.create_page()

        print("✓ Browser initialized")
        return self.page

    async def create_page(self) -> Any:
        """Create a new page with the capture attached."""
        if not self.context:
            return await self.initialize()

        self.page = await self.context.new_page()
        self.page.set_default_timeout(self.config.browser.timeout)
        await self.capture.attach_to_page(self.page)

        return self.page

    async def goto(self, url: str, wait_until: str = "networkidle"):
        """
        Navigate to URL.

        Raises:
            NavigationError: if the page fails to load
        """
        try:
            await self.page.goto(url, wait_until=wait_until, timeout=self.config.browser.timeout)
        except PlaywrightError as e:
            raise NavigationError(url, str(e).splitlines()[0]) from e
        if self.config.verbose:
            print(f"  ✓ Loaded: {url}")

    async def screenshot(self, filename: str = "screenshot.png") -> Optional[str]:
        """Full-page screenshot into the output directory. Never raises."""
        if not self.page:
            return None
        path = self.config.output_path(filename)
        try:
            await self.page.screenshot(path=path, full_page=True)
        except PlaywrightError as e:
            print(f"  ✗ Screenshot failed: {e}")
            return None
        print(f"📸 Screenshot saved: {path}")
        return path

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    async def login(self, credentials: Credentials):
        """
        Fill and submit the login form, then wait for the URL to leave login.

        Raises:
            AuthenticationError: form missing, or still on the login page
            NavigationError: login page failed to load
        """
        print("🔐 Logging into HailTrace...")
        await self.goto(self.config.login_url)

        try:
            await self.page.wait_for_selector(LOGIN_FORM_SELECTOR, timeout=10000)
        except PlaywrightTimeoutError as e:
            raise AuthenticationError('Login form not found') from e

        email_input = await self._first_element(EMAIL_SELECTORS)
        password_input = await self._first_element(PASSWORD_SELECTORS)
        if not email_input or not password_input:
            raise AuthenticationError('Login form not found')

        await self._fill(email_input, credentials.email)
        await self._fill(password_input, credentials.password)
        print("  Credentials entered")

        method = await self._submit(password_input)
        print(f"  Submitted via {method}")

        await self._wait_for_redirect()

        if URLUtils.is_login_url(self.page.url):
            page_error = await self._visible_error()
            raise AuthenticationError('Login failed', page_error or 'still on login page')

        self.is_logged_in = True
        print("✅ Successfully logged in")

    async def _first_element(self, selectors):
        for selector in selectors:
            element = await self.page.query_selector(selector)
            if element:
                return element
        return None

    async def _fill(self, element, value: str):
        # Triple-click selects any prefilled value so typing replaces it
        await element.click(click_count=3)
        await element.type(value, delay=50)

    async def _submit(self, password_input) -> str:
        """Try text match, submit selectors, an in-page scan, then Enter."""
        try:
            await self.page.get_by_text(LOGIN_TEXT).first.click(timeout=3000)
            return 'button text'
        except PlaywrightError:
            pass

        for selector in SUBMIT_SELECTORS:
            button = await self.page.query_selector(selector)
            if button:
                await button.click()
                return selector

        if await self.page.evaluate(SCAN_LOGIN_BUTTON_JS):
            return 'button scan'

        await password_input.press('Enter')
        return 'Enter key'

    async def _wait_for_redirect(self):
        try:
            await self.page.wait_for_url(
                lambda url: not URLUtils.is_login_url(url),
                timeout=self.config.browser.timeout,
            )
        except PlaywrightTimeoutError:
            return
        await asyncio.sleep(self.config.delay(self.config.page_settle_ms))

    async def _visible_error(self) -> Optional[str]:
        try:
            return await self.page.evaluate(VISIBLE_ERROR_JS, LOGIN_ERROR_SELECTOR)
        except PlaywrightError:
            return None

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    async def close(self):
        """Close browser and cleanup. Safe to call more than once; every release step runs."""
        steps = [
            ('context', self.context.close if self.context else None),
            ('browser', self.browser.close if self.browser else None),
            ('playwright', self.playwright.stop if self.playwright else None),
        ]
        self.page = None
        self.context = None
        self.browser = None
        self.playwright = None

        for name, release in steps:
            if release is None:
                continue
            try:
                await release()
            except PlaywrightError as e:
                print(f"⚠ Cleanup warning ({name}): {e}")
        print("🔒 Browser closed")
