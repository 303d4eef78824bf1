# hailtrace_scraper/core/__init__.py
"""Core scraper components."""

from .config import BrowserConfig, Credentials, ScraperConfig, get_credentials
from .exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    HailTraceError,
    LocationExhausted,
    NavigationError,
)
from .models import CapturedApiCall, CapturedResponse, Coordinates, ExtractionResult, StormEvent

__all__ = [
    'BrowserConfig',
    'Credentials',
    'ScraperConfig',
    'get_credentials',
    'APIError',
    'AuthenticationError',
    'ConfigurationError',
    'HailTraceError',
    'LocationExhausted',
    'NavigationError',
    'CapturedApiCall',
    'CapturedResponse',
    'Coordinates',
    'ExtractionResult',
    'StormEvent',
]
