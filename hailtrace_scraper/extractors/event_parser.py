"""Heuristic parsing of storm events from page text.

Event containers on the dashboard have no stable structure, so each
candidate's text is scanned with ordered regular expressions:

    date  →  MM/DD/YYYY, Month DD YYYY, YYYY-MM-DD
    hail  →  1.5", 1.5 inch, hail: 1.5, 1.5 diameter
    wind  →  60 mph, 52 knots, wind: 60

A candidate becomes a StormEvent only when at least one field matched.
"""

import re
from typing import Iterable, List, Optional

from ..core.models import StormEvent

MIN_TEXT_LENGTH = 5
MAX_TEXT_LENGTH = 500
RAW_TEXT_LENGTH = 200

KNOTS_TO_MPH = 1.15078

# Navigation and site chrome that shows up inside card/item containers
CHROME_KEYWORDS = ['Previous', 'Next', 'Maps', 'Campaigns']

DATE_PATTERNS = [
    re.compile(r'\b(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})\b'),
    re.compile(r'(\w{3,9}\s+\d{1,2},?\s+\d{4})'),
    re.compile(r'(\d{4}[/\-]\d{1,2}[/\-]\d{1,2})'),
]

HAIL_PATTERNS = [
    re.compile(r'(\d+\.?\d*)\s*["″]\s*(?:hail)?', re.IGNORECASE),
    re.compile(r'(\d+\.?\d*)\s*(?:inch(?:es)?|in)\b\s*(?:hail)?', re.IGNORECASE),
    re.compile(r'hail[:\s]*(\d+\.?\d*)\s*["″in]?', re.IGNORECASE),
    re.compile(r'(\d+\.?\d*)\s*(?:diameter|dia)', re.IGNORECASE),
]

MPH_PATTERN = re.compile(r'(\d+)\s*(?:mph|MPH)')
KNOTS_PATTERN = re.compile(r'(\d+)\s*(?:knots?|kts?)\b', re.IGNORECASE)
WIND_LABEL_PATTERN = re.compile(r'wind[:\s]*(\d+)', re.IGNORECASE)


def is_candidate_text(text: str) -> bool:
    """Reject navigation chrome and texts outside the plausible length range."""
    if len(text) < MIN_TEXT_LENGTH or len(text) > MAX_TEXT_LENGTH:
        return False
    return not any(keyword in text for keyword in CHROME_KEYWORDS)


def parse_date(text: str) -> Optional[str]:
    for pattern in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def parse_hail_size(text: str) -> Optional[float]:
    """Hail diameter in inches."""
    for pattern in HAIL_PATTERNS:
        match = pattern.search(text)
        if match:
            return float(match.group(1))
    return None


def parse_wind_speed(text: str) -> Optional[int]:
    """Wind speed in mph; knots are converted."""
    match = MPH_PATTERN.search(text)
    if match:
        return int(match.group(1))

    match = KNOTS_PATTERN.search(text)
    if match:
        return round(int(match.group(1)) * KNOTS_TO_MPH)

    match = WIND_LABEL_PATTERN.search(text)
    if match:
        return int(match.group(1))

    return None


def parse_event_text(text: str, source: str = 'HailTrace') -> Optional[StormEvent]:
    """
    Turn one container's text into a StormEvent.

    Args:
        text: textContent of a candidate container
        source: label stored on the event

    Returns:
        StormEvent, or None when no date, hail size or wind speed was found
    """
    date = parse_date(text)
    size = parse_hail_size(text)
    wind = parse_wind_speed(text)

    if date is None and size is None and wind is None:
        return None

    if size is not None:
        event_type = 'Hail'
    elif wind is not None:
        event_type = 'Wind'
    else:
        event_type = 'Unknown'

    return StormEvent(
        date=date,
        type=event_type,
        size=size,
        wind=wind,
        source=source,
        raw_text=text[:RAW_TEXT_LENGTH],
    )


def parse_events(texts: Iterable[str], source: str = 'HailTrace') -> List[StormEvent]:
    """Parse candidate texts in scan order. Duplicates are kept."""
    events = []
    for text in texts:
        if not is_candidate_text(text):
            continue
        event = parse_event_text(text, source=source)
        if event:
            events.append(event)
    return events
