"""Tests for the storm data model."""

import dataclasses
import json

import pytest

from hailtrace_scraper.core.models import (
    CapturedResponse,
    Coordinates,
    ExtractionResult,
    StormEvent,
)


class TestStormEvent:

    def test_serializes_raw_text_in_camel_case(self):
        event = StormEvent(date="03/14/2024", type="Hail", size=1.5, raw_text="Hail: 1.5\"")
        data = event.to_dict()

        assert data['rawText'] == "Hail: 1.5\""
        assert 'raw_text' not in data
        assert data['source'] == 'HailTrace'

    def test_is_immutable(self):
        event = StormEvent(date="2024-01-01")
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.size = 2.0

    def test_from_dict_defaults_missing_type(self):
        event = StormEvent.from_dict({'date': '2024-01-01', 'type': None})
        assert event.type == 'Unknown'


class TestExtractionResult:

    def test_events_default_to_empty_list(self):
        result = ExtractionResult()
        assert result.events == []
        assert result.to_dict()['events'] == []

    def test_json_round_trip(self):
        result = ExtractionResult(
            address="123 Main St, Arlington, VA",
            coordinates=Coordinates(lat=38.97, lng=-77.51),
            damage_score=72,
            events=[
                StormEvent(date="03/14/2024", type="Hail", size=1.5, raw_text="a"),
                StormEvent(wind=60, type="Wind", source="HailTrace API", raw_text="b"),
            ],
            raw_page_data={'eventSectionFound': True, 'eventCount': 2},
            summary="Two events in the last year at this address.",
            raw_api_data=[{'url': 'https://x/api', 'status': 200, 'data': {'events': []}}],
        )

        restored = ExtractionResult.from_json(result.to_json())

        assert restored == result

    def test_to_dict_uses_wire_keys(self):
        data = ExtractionResult(damage_score=5).to_dict()
        assert set(data) == {
            'address', 'coordinates', 'damageScore', 'events', 'summary',
            'rawPageData', 'rawApiData', 'extractedAt',
        }
        assert data['coordinates'] == {'lat': None, 'lng': None}

    def test_from_dict_tolerates_null_events(self):
        result = ExtractionResult.from_dict({'events': None})
        assert result.events == []

    def test_extracted_at_is_iso_timestamp(self):
        extracted_at = ExtractionResult().extracted_at
        assert 'T' in extracted_at
        assert extracted_at.endswith('+00:00')


def test_captured_response_to_dict_is_json_safe():
    response = CapturedResponse(url="https://x/graphql", status=200, data={'data': {}})
    assert json.loads(json.dumps(response.to_dict()))['status'] == 200
