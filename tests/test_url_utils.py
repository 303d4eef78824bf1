"""Tests for URL helpers."""

import pytest

from hailtrace_scraper.utils.url_utils import URLUtils


class TestURLUtils:

    def test_coordinates_url(self):
        url = URLUtils.coordinates_url("https://app.hailtrace.com/maps", 38.973, -77.5144)
        assert url == "https://app.hailtrace.com/maps?lat=38.973&lng=-77.5144&zoom=12&m=38.973,-77.5144,12"

    def test_parse_coordinates_round_trip(self):
        url = URLUtils.coordinates_url("https://app.hailtrace.com/maps", 38.973, -77.5144)
        assert URLUtils.parse_coordinates(url) == (38.973, -77.5144)

    def test_parse_coordinates_lon_and_colon(self):
        assert URLUtils.parse_coordinates("https://x/maps#lat:40.1/lon:-75.2") == (40.1, -75.2)
        assert URLUtils.parse_coordinates("https://x/maps") == (None, None)

    def test_find_coordinates_in_text(self):
        assert URLUtils.find_coordinates_in_text("at 38.97301,-77.51442") == (38.97301, -77.51442)
        assert URLUtils.find_coordinates_in_text("score 72") is None

    @pytest.mark.parametrize('url, expected', [
        ("https://app.hailtrace.com/login", True),
        ("https://app.hailtrace.com/signin?next=/maps", True),
        ("https://app.hailtrace.com/maps", False),
        ("https://app.hailtrace.com/maps?ref=login", False),
    ])
    def test_is_login_url(self, url, expected):
        assert URLUtils.is_login_url(url) is expected
