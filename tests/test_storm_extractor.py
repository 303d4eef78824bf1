"""Tests for DOM extraction and the network fallback."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hailtrace_scraper.dynamic.network_capture import NetworkCapture
from hailtrace_scraper.extractors.storm_extractor import (
    StormDataExtractor,
    build_result,
    find_address,
    find_coordinates,
    find_damage_score,
    find_summary,
)


def snapshot(**overrides):
    data = {
        'url': 'https://app.hailtrace.com/maps',
        'searchValue': '',
        'headingTexts': [],
        'scoreTexts': [],
        'summaryTexts': [],
        'candidateTexts': [],
        'bodyText': '',
        'hasSkeletonLoaders': False,
    }
    data.update(overrides)
    return data


async def captured(capture, url, data):
    response = MagicMock(url=url, status=200)
    response.json = AsyncMock(return_value=data)
    await capture._handle_response(response)


class TestBuildResult:

    def test_events_from_candidates(self):
        result = build_result(snapshot(candidateTexts=[
            'Hail: 1.5" on 03/14/2024',
            'Maps Campaigns Territories',
            'Wind 60 mph recorded',
        ]))

        assert [(e.type, e.size, e.wind) for e in result.events] == [
            ('Hail', 1.5, None),
            ('Wind', None, 60),
        ]
        assert result.raw_page_data['candidateCount'] == 3

    def test_empty_page_still_has_event_list(self):
        result = build_result({})
        assert result.events == []
        assert result.address is None
        assert result.coordinates.lat is None

    def test_event_section_and_count(self):
        result = build_result(snapshot(bodyText="Most Recent Events ... 14 events found"))

        assert result.raw_page_data['eventSectionFound'] is True
        assert result.raw_page_data['eventCount'] == 14

    def test_event_count_ignored_without_section(self):
        result = build_result(snapshot(bodyText="14 events found"))
        assert 'eventCount' not in result.raw_page_data


class TestFieldHelpers:

    def test_address_prefers_search_value(self):
        assert find_address("123 Main St", ["456 Oak Ave"]) == "123 Main St"

    def test_address_from_heading_shape(self):
        assert find_address(None, ["Storm History", "456 Oak Ave, Reston VA"]) == "456 Oak Ave, Reston VA"
        assert find_address("", ["Dashboard"]) is None

    def test_damage_score_first_number(self):
        assert find_damage_score(["Risk level", "Damage Score: 72 / 100"]) == 72
        assert find_damage_score([]) is None

    def test_summary_filters(self):
        assert find_summary(["short", "Previous storms in your area were mild"]) is None
        assert find_summary(["This property saw three hail events this year."]) == \
            "This property saw three hail events this year."

    def test_coordinates_from_url(self):
        coords = find_coordinates("https://app.hailtrace.com/maps?lat=38.973&lng=-77.5144&zoom=12", "")
        assert (coords.lat, coords.lng) == (38.973, -77.5144)

    def test_coordinates_fall_back_to_page_text(self):
        coords = find_coordinates("https://app.hailtrace.com/maps", "Pin at 38.97301, -77.51442 (approx)")
        assert (coords.lat, coords.lng) == (38.97301, -77.51442)


class TestExtract:

    @pytest.mark.asyncio
    async def test_falls_back_to_captured_payloads(self, page):
        capture = NetworkCapture()
        await captured(capture, "https://app.hailtrace.com/api/events",
                       {'events': [{'date': '2024-01-01', 'hailSize': 2}]})
        page.evaluate.return_value = snapshot(candidateTexts=['Loading...'])

        result = await StormDataExtractor(page, capture, verbose=False).extract()

        assert len(result.events) == 1
        assert result.events[0].size == 2
        assert result.events[0].source == 'HailTrace API'
        assert [d['url'] for d in result.raw_api_data] == ["https://app.hailtrace.com/api/events"]

    @pytest.mark.asyncio
    async def test_dom_events_win_over_payloads(self, page):
        capture = NetworkCapture()
        await captured(capture, "https://app.hailtrace.com/api/events",
                       {'events': [{'date': '2024-01-01', 'hailSize': 2}]})
        page.evaluate.return_value = snapshot(candidateTexts=['Wind 60 mph recorded'])

        result = await StormDataExtractor(page, capture, verbose=False).extract()

        assert [e.source for e in result.events] == ['HailTrace']
        assert result.raw_api_data == []

    @pytest.mark.asyncio
    async def test_no_dom_events_and_no_payloads(self, page):
        page.evaluate.return_value = snapshot()

        result = await StormDataExtractor(page, NetworkCapture(), verbose=False).extract()

        assert result.events == []
