"""Extract storm data from the rendered HailTrace results view."""

import re
from typing import Dict, Iterable, List, Optional

from ..core.models import Coordinates, ExtractionResult
from ..utils.url_utils import URLUtils
from .event_parser import MAX_TEXT_LENGTH, parse_events

ADDRESS_PATTERN = re.compile(r'\d+.*[a-zA-Z]')
SCORE_PATTERN = re.compile(r'(\d+)')
EVENT_COUNT_PATTERN = re.compile(r'(\d+)\s*events?\s*found', re.IGNORECASE)

EVENT_SECTION_MARKERS = ['Most Recent Events', 'Recent Events', 'Storm Events']
SUMMARY_EXCLUDE = ['Previous', 'Maps']

MAX_ADDRESS_LENGTH = 200
MIN_SUMMARY_LENGTH = 20
MAX_SUMMARY_LENGTH = 500

# The page script only gathers raw text; every decision is made in Python.
COLLECT_JS = """
(maxLength) => {
    const text = (el) => el ? (el.textContent || '').trim() : '';
    const firstTexts = (selectors) => selectors
        .map(s => text(document.querySelector(s)))
        .filter(Boolean);

    const searchInput = document.querySelector('input[placeholder*="Address"]') ||
                        document.querySelector('input[placeholder*="Search"]');

    const containers = document.querySelectorAll(
        '[class*="event"], [class*="Event"], [class*="card"], [class*="Card"], ' +
        'table tbody tr, .list-item, [class*="item"], [class*="Item"]'
    );

    const skeletons = document.querySelectorAll(
        '[class*="skeleton"], [class*="Skeleton"], [class*="loading"], [class*="Loading"]'
    );

    return {
        url: window.location.href,
        searchValue: searchInput ? searchInput.value : null,
        headingTexts: firstTexts([
            '[class*="address"]', '[class*="location"]', '.location-name',
            'h1', 'h2', 'h3', '[class*="title"]'
        ]),
        scoreTexts: firstTexts([
            '[class*="score"]', '[class*="Score"]', '[class*="damage"]', '[class*="Damage"]',
            '[class*="risk"]', '[class*="Risk"]', '[class*="rating"]'
        ]),
        summaryTexts: firstTexts([
            '.summary', '.description', '[class*="summary"]',
            '[class*="description"]', '[class*="info"]', 'p'
        ]),
        candidateTexts: Array.from(containers).map(
            el => (el.textContent || '').replace(/\\s+/g, ' ').trim().slice(0, maxLength)
        ),
        bodyText: (document.body.textContent || '').slice(0, 200000),
        hasSkeletonLoaders: skeletons.length > 0
    };
}
"""


def find_address(search_value: Optional[str], heading_texts: Iterable[str]) -> Optional[str]:
    """Search box value first, else the first heading that looks like a street address."""
    if search_value:
        return search_value
    for text in heading_texts:
        if ADDRESS_PATTERN.search(text) and len(text) < MAX_ADDRESS_LENGTH:
            return text
    return None


def find_damage_score(score_texts: Iterable[str]) -> Optional[int]:
    for text in score_texts:
        match = SCORE_PATTERN.search(text)
        if match:
            return int(match.group(1))
    return None


def find_summary(summary_texts: Iterable[str]) -> Optional[str]:
    for text in summary_texts:
        if not MIN_SUMMARY_LENGTH < len(text) < MAX_SUMMARY_LENGTH:
            continue
        if any(word in text for word in SUMMARY_EXCLUDE):
            continue
        return text
    return None


def find_coordinates(url: str, body_text: str) -> Coordinates:
    """URL parameters win; page text is used only when the URL has no latitude."""
    lat, lng = URLUtils.parse_coordinates(url)
    if lat is None:
        pair = URLUtils.find_coordinates_in_text(body_text)
        if pair:
            lat, lng = pair
    return Coordinates(lat=lat, lng=lng)


def page_metadata(snapshot: Dict, candidate_count: int) -> Dict:
    body_text = snapshot.get('bodyText') or ''
    metadata = {
        'url': snapshot.get('url'),
        'hasSkeletonLoaders': bool(snapshot.get('hasSkeletonLoaders')),
        'candidateCount': candidate_count,
    }
    if any(marker in body_text for marker in EVENT_SECTION_MARKERS):
        metadata['eventSectionFound'] = True
        match = EVENT_COUNT_PATTERN.search(body_text)
        if match:
            metadata['eventCount'] = int(match.group(1))
    return metadata


def build_result(snapshot: Dict) -> ExtractionResult:
    """Turn a raw page snapshot into an ExtractionResult."""
    candidates: List[str] = snapshot.get('candidateTexts') or []
    return ExtractionResult(
        address=find_address(snapshot.get('searchValue'), snapshot.get('headingTexts') or []),
        coordinates=find_coordinates(snapshot.get('url') or '', snapshot.get('bodyText') or ''),
        damage_score=find_damage_score(snapshot.get('scoreTexts') or []),
        events=parse_events(candidates),
        raw_page_data=page_metadata(snapshot, len(candidates)),
        summary=find_summary(snapshot.get('summaryTexts') or []),
    )


class StormDataExtractor:
    """
    Reads storm data out of the current page.

    When the DOM yields no events, events normalized from the captured
    API responses are used instead and the contributing payloads are kept
    in raw_api_data.
    """

    def __init__(self, page, capture=None, verbose: bool = True):
        self.page = page
        self.capture = capture
        self.verbose = verbose

    async def snapshot(self) -> Dict:
        # One extra character so over-long texts still fail the length check
        return await self.page.evaluate(COLLECT_JS, MAX_TEXT_LENGTH + 1)

    async def extract(self) -> ExtractionResult:
        print("📊 Extracting storm data...")

        result = build_result(await self.snapshot())

        if not result.events and self.capture is not None:
            self._apply_network_fallback(result)

        self._log(result)
        return result

    def _apply_network_fallback(self, result: ExtractionResult):
        if not self.capture.get_responses():
            return
        print("🔄 Attempting extraction from captured API responses...")
        events = self.capture.extract_events()
        if events:
            result.events = events
            result.raw_api_data = self.capture.event_sources()
            print(f"✅ Extracted {len(events)} events from API responses")

    def _log(self, result: ExtractionResult):
        print(f"✅ Extracted {len(result.events)} storm events")
        if not self.verbose:
            return
        if result.address:
            print(f"   Address: {result.address}")
        if result.damage_score is not None:
            print(f"   Damage Score: {result.damage_score}")
        if 'eventCount' in result.raw_page_data:
            print(f"   Event count from page: {result.raw_page_data['eventCount']}")
        if result.raw_page_data.get('hasSkeletonLoaders'):
            print("   ⚠️ Page still has skeleton loaders - data may still be loading")
