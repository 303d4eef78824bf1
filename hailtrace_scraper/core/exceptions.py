"""Error taxonomy for the HailTrace scraper.

Only configuration, authentication and navigation errors end a run.
Everything else degrades into a partially populated ExtractionResult.
"""


class HailTraceError(Exception):
    """Base class for scraper errors."""


class ConfigurationError(HailTraceError):
    """Required configuration (credentials) is missing."""


class AuthenticationError(HailTraceError):
    """Login form not found, or the login page did not let us through."""

    def __init__(self, message: str, page_error: str = None):
        self.page_error = page_error
        if page_error:
            message = f"{message}: {page_error}"
        super().__init__(message)


class NavigationError(HailTraceError):
    """A page could not be loaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load {url}: {reason}")


class LocationExhausted(HailTraceError):
    """Every strategy for a UI target failed verification."""

    def __init__(self, target: str, attempts=None):
        self.target = target
        self.attempts = list(attempts or [])
        tried = ', '.join(self.attempts) or 'none'
        super().__init__(f"Could not locate '{target}' (tried: {tried})")


class APIError(HailTraceError):
    """The GraphQL endpoint could not be reached or returned garbage."""
