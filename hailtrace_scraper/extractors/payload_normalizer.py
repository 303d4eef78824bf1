"""Normalize captured API payloads into StormEvents."""

import json
from typing import Any, Dict, Iterable, List, Optional

from ..core.models import StormEvent

API_SOURCE = 'HailTrace API'

DATE_FIELDS = ['date', 'eventDate', 'event_date', 'timestamp']
SIZE_FIELDS = [
    'hailSize', 'hail_size', 'size', 'diameter',
    'maxAlgorithmHailSize', 'maxMeteorologistHailSize',
]
WIND_FIELDS = ['windSpeed', 'wind_speed', 'wind', 'maxMeteorologistWindSpeedMPH']
TYPE_FIELDS = ['type', 'eventType', 'event_type', 'types']


def _first(item: Dict, fields: List[str]) -> Any:
    for name in fields:
        value = item.get(name)
        if value not in (None, ''):
            return value
    return None


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip().rstrip('"″').strip())
        except ValueError:
            return None
    return None


def _first_measure(item: Dict, fields: List[str]) -> Optional[float]:
    """First non-zero numeric alias. A 0 size or speed means nothing was measured."""
    for name in fields:
        number = _to_number(item.get(name))
        if number:
            return number
    return None


def _normalize_type(raw_type: Any, size, wind) -> str:
    if isinstance(raw_type, (list, tuple)):
        raw_type = ' '.join(str(t) for t in raw_type)

    if raw_type:
        lowered = str(raw_type).lower()
        if 'hail' in lowered:
            return 'Hail'
        if 'wind' in lowered:
            return 'Wind'
        return 'Unknown'

    if size is not None:
        return 'Hail'
    if wind is not None:
        return 'Wind'
    return 'Unknown'


def normalize_event(item: Dict) -> StormEvent:
    """Map one payload item onto a StormEvent via field-name aliasing."""
    size = _first_measure(item, SIZE_FIELDS)
    wind = _first_measure(item, WIND_FIELDS)
    date = _first(item, DATE_FIELDS)

    return StormEvent(
        date=str(date) if date is not None else None,
        type=_normalize_type(_first(item, TYPE_FIELDS), size, wind),
        size=size,
        wind=wind,
        source=API_SOURCE,
        raw_text=json.dumps(item, default=str)[:200],
    )


def _looks_like_event(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    return _first(item, DATE_FIELDS + SIZE_FIELDS + WIND_FIELDS + TYPE_FIELDS) is not None


def _graphql_lists(envelope: Dict) -> Iterable[List]:
    """Lists nested one level inside a GraphQL `data` envelope."""
    for value in envelope.values():
        if isinstance(value, list):
            yield value
        elif isinstance(value, dict) and isinstance(value.get('results'), list):
            yield value['results']


def events_from_payload(data: Any) -> List[StormEvent]:
    """
    Walk the known response shapes and normalize every event-like item.

    Shapes:
        [ {...}, ... ]
        {"events": [...]}
        {"data": [...]}
        {"results": [...]}
        {"data": {"<operation>": {"results": [...]}}}
    """
    events = []

    if isinstance(data, list):
        events.extend(normalize_event(item) for item in data if _looks_like_event(item))
        return events

    if not isinstance(data, dict):
        return events

    if isinstance(data.get('events'), list):
        events.extend(normalize_event(item) for item in data['events'] if isinstance(item, dict))

    inner = data.get('data')
    if isinstance(inner, list):
        events.extend(normalize_event(item) for item in inner if _looks_like_event(item))
    elif isinstance(inner, dict):
        for items in _graphql_lists(inner):
            events.extend(normalize_event(item) for item in items if _looks_like_event(item))

    if isinstance(data.get('results'), list):
        events.extend(normalize_event(item) for item in data['results'] if isinstance(item, dict))

    return events
