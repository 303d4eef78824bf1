"""Data model for extracted storm data."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

EVENT_TYPES = ('Hail', 'Wind', 'Unknown')


@dataclass(frozen=True)
class StormEvent:
    """A single hail/wind event read from the page or a captured payload."""
    date: Optional[str] = None
    type: str = 'Unknown'
    size: Optional[float] = None  # inches
    wind: Optional[Number] = None  # mph
    source: str = 'HailTrace'
    raw_text: str = ''

    def to_dict(self) -> Dict:
        return {
            'date': self.date,
            'type': self.type,
            'size': self.size,
            'wind': self.wind,
            'source': self.source,
            'rawText': self.raw_text,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'StormEvent':
        return cls(
            date=data.get('date'),
            type=data.get('type') or 'Unknown',
            size=data.get('size'),
            wind=data.get('wind'),
            source=data.get('source', 'HailTrace'),
            raw_text=data.get('rawText', ''),
        )


@dataclass
class Coordinates:
    lat: Optional[float] = None
    lng: Optional[float] = None

    def to_dict(self) -> Dict:
        return {'lat': self.lat, 'lng': self.lng}


@dataclass
class CapturedApiCall:
    """An outgoing request whose URL looked like data-API traffic."""
    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    def to_dict(self) -> Dict:
        return {'url': self.url, 'method': self.method, 'headers': self.headers, 'body': self.body}


@dataclass
class CapturedResponse:
    """A response whose body parsed as JSON."""
    url: str
    status: int
    data: Any

    def to_dict(self) -> Dict:
        return {'url': self.url, 'status': self.status, 'data': self.data}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ExtractionResult:
    """
    Result of one extraction run.

    `events` is always a list, even when nothing was found on the page.
    """
    address: Optional[str] = None
    coordinates: Coordinates = field(default_factory=Coordinates)
    damage_score: Optional[Number] = None
    events: List[StormEvent] = field(default_factory=list)
    raw_page_data: Dict[str, Any] = field(default_factory=dict)
    extracted_at: str = field(default_factory=_utc_now)
    summary: Optional[str] = None
    raw_api_data: List[Dict] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'address': self.address,
            'coordinates': self.coordinates.to_dict(),
            'damageScore': self.damage_score,
            'events': [event.to_dict() for event in self.events],
            'summary': self.summary,
            'rawPageData': self.raw_page_data,
            'rawApiData': self.raw_api_data,
            'extractedAt': self.extracted_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ExtractionResult':
        coords = data.get('coordinates') or {}
        return cls(
            address=data.get('address'),
            coordinates=Coordinates(lat=coords.get('lat'), lng=coords.get('lng')),
            damage_score=data.get('damageScore'),
            events=[StormEvent.from_dict(e) for e in data.get('events') or []],
            raw_page_data=dict(data.get('rawPageData') or {}),
            extracted_at=data.get('extractedAt') or _utc_now(),
            summary=data.get('summary'),
            raw_api_data=list(data.get('rawApiData') or []),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> 'ExtractionResult':
        return cls.from_dict(json.loads(text))
