"""Configuration management for the HailTrace scraper."""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

load_dotenv()


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)


@dataclass
class BrowserConfig:
    """Configuration for browser execution."""
    headless: bool = True
    timeout: int = 30000  # ms
    viewport: Dict = field(default_factory=lambda: {'width': 1920, 'height': 1080})
    user_agent: str = DEFAULT_USER_AGENT
    launch_args: List[str] = field(default_factory=lambda: [
        '--no-sandbox',
        '--disable-setuid-sandbox',
        '--disable-dev-shm-usage',
        '--disable-accelerated-2d-canvas',
        '--disable-gpu',
    ])


@dataclass
class Credentials:
    """HailTrace login credentials."""
    email: str
    password: str

    @classmethod
    def from_env(cls) -> 'Credentials':
        """
        Read credentials from HAILTRACE_EMAIL / HAILTRACE_PASSWORD.

        Raises:
            ConfigurationError: if either variable is missing
        """
        email = os.getenv('HAILTRACE_EMAIL')
        password = os.getenv('HAILTRACE_PASSWORD')

        if not email or not password:
            raise ConfigurationError(
                'Missing credentials. Set HAILTRACE_EMAIL and HAILTRACE_PASSWORD environment variables.'
            )

        return cls(email=email, password=password)


@dataclass
class ScraperConfig:
    """Configuration for the HailTrace scraper."""

    # Target website
    login_url: str = "https://app.hailtrace.com/login"
    maps_url: str = "https://app.hailtrace.com/maps"
    graphql_url: str = "https://app-graphql.hailtrace.com/graphql"

    # Storage settings
    output_dir: str = "./hailtrace-exports"

    # Run flags
    debug: bool = False
    slow_mode: bool = False
    slow_factor: float = 3.0
    verbose: bool = True
    enable_places_search: bool = False

    # Fixed delays (ms), scaled by slow mode
    page_settle_ms: int = 2000
    typing_delay_ms: int = 80
    autocomplete_wait_ms: int = 2000
    autocomplete_timeout_ms: int = 5000
    results_settle_ms: int = 8000
    load_timeout_ms: int = 20000
    load_poll_ms: int = 1000
    download_wait_ms: int = 5000

    # Search retries before the orchestrator gives up
    search_retries: int = 2

    browser: BrowserConfig = field(default_factory=BrowserConfig)

    def __post_init__(self):
        """Initialize configuration from environment variables."""
        self.output_dir = os.getenv('HAILTRACE_OUTPUT_DIR') or self.output_dir

        # Default headless; only the literal 'false' shows the browser
        headless_env = os.getenv('HAILTRACE_HEADLESS')
        if headless_env is not None:
            self.browser.headless = headless_env.lower() != 'false'

    def delay(self, ms: int) -> float:
        """Convert a fixed delay in ms to seconds, stretched in slow mode."""
        factor = self.slow_factor if self.slow_mode else 1.0
        return (ms * factor) / 1000

    def output_path(self, filename: str) -> str:
        """Get the full path for an output file, creating the directory."""
        output_dir = os.path.abspath(self.output_dir)
        os.makedirs(output_dir, exist_ok=True)
        return os.path.join(output_dir, filename)

    def validate(self) -> bool:
        """Validate configuration."""
        if self.slow_factor < 1:
            print("⚠ Warning: slow_factor below 1 would shorten delays")
            return False
        if self.search_retries < 1:
            print("⚠ Warning: search_retries below 1, one attempt will still be made")
            return False
        return True


def get_credentials(email: Optional[str] = None, password: Optional[str] = None) -> Credentials:
    """Return explicit credentials if both are given, else read the environment."""
    if email and password:
        return Credentials(email=email, password=password)
    return Credentials.from_env()
