"""URL manipulation utilities."""

import re
from typing import Optional, Tuple
from urllib.parse import urlencode, urlparse

LAT_PATTERN = re.compile(r'lat[=:](-?\d+\.?\d*)')
LNG_PATTERN = re.compile(r'(?:lng|lon)[=:](-?\d+\.?\d*)')

# "38.97301, -77.51442" style pairs in page text
TEXT_COORDINATES_PATTERN = re.compile(r'(-?\d{2,3}\.\d{4,}),?\s*(-?\d{2,3}\.\d{4,})')

LOGIN_MARKERS = ('login', 'signin', 'sign-in')


class URLUtils:
    """Utilities for HailTrace URLs."""

    DEFAULT_ZOOM = 12

    @staticmethod
    def coordinates_url(maps_url: str, lat: float, lng: float, zoom: int = DEFAULT_ZOOM) -> str:
        """
        Maps URL centred on a coordinate pair.

        Args:
            maps_url: base maps page URL
            lat: latitude
            lng: longitude
            zoom: map zoom level

        Returns:
            e.g. https://app.hailtrace.com/maps?lat=38.97&lng=-77.51&zoom=12&m=38.97,-77.51,12
        """
        query = urlencode(
            {'lat': lat, 'lng': lng, 'zoom': zoom, 'm': f'{lat},{lng},{zoom}'},
            safe=',',
        )
        return f"{maps_url}?{query}"

    @staticmethod
    def parse_coordinates(url: str) -> Tuple[Optional[float], Optional[float]]:
        """Read lat/lng (or lon) parameters from a URL; each side may be None."""
        lat_match = LAT_PATTERN.search(url or '')
        lng_match = LNG_PATTERN.search(url or '')
        lat = float(lat_match.group(1)) if lat_match else None
        lng = float(lng_match.group(1)) if lng_match else None
        return lat, lng

    @staticmethod
    def find_coordinates_in_text(text: str) -> Optional[Tuple[float, float]]:
        """First decimal coordinate pair in free text."""
        match = TEXT_COORDINATES_PATTERN.search(text or '')
        if not match:
            return None
        return float(match.group(1)), float(match.group(2))

    @staticmethod
    def is_login_url(url: str) -> bool:
        """True while the browser is still on a login / sign-in page."""
        path = urlparse(url or '').path.lower()
        return any(marker in path for marker in LOGIN_MARKERS)
