# hailtrace_scraper/extractors/__init__.py
"""Storm data extractors."""

from .event_parser import parse_event_text, parse_events
from .payload_normalizer import events_from_payload, normalize_event
from .storm_extractor import StormDataExtractor

__all__ = [
    'parse_event_text',
    'parse_events',
    'events_from_payload',
    'normalize_event',
    'StormDataExtractor',
]
