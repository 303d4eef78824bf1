"""Tests for DOM text heuristics."""

from hailtrace_scraper.extractors.event_parser import (
    is_candidate_text,
    parse_date,
    parse_event_text,
    parse_events,
    parse_hail_size,
    parse_wind_speed,
)


class TestParseEventText:

    def test_hail_with_date(self):
        event = parse_event_text('Hail: 1.5" on 03/14/2024')

        assert event.date == "03/14/2024"
        assert event.size == 1.5
        assert event.type == "Hail"
        assert event.wind is None
        assert event.source == "HailTrace"

    def test_wind_only(self):
        event = parse_event_text("Wind 60 mph recorded")

        assert event.wind == 60
        assert event.type == "Wind"
        assert event.size is None
        assert event.date is None

    def test_date_only_is_unknown_type(self):
        event = parse_event_text("Storm observed 2024-05-02")

        assert event.date == "2024-05-02"
        assert event.type == "Unknown"

    def test_no_fields_yields_nothing(self):
        assert parse_event_text("View details for this property") is None

    def test_hail_wins_type_when_both_present(self):
        event = parse_event_text("1.25 inch hail, 70 mph gusts")
        assert event.type == "Hail"
        assert event.size == 1.25
        assert event.wind == 70

    def test_raw_text_truncated(self):
        text = "Hail: 1.0\" " + "x" * 400
        event = parse_event_text(text)
        assert len(event.raw_text) == 200


class TestFieldPatterns:

    def test_date_formats_in_priority_order(self):
        assert parse_date("on 3/4/24") == "3/4/24"
        assert parse_date("March 14, 2024 storm") == "March 14, 2024"
        assert parse_date("event 2024/06/01") == "2024/06/01"

    def test_iso_date_not_split(self):
        assert parse_date("2024-01-01") == "2024-01-01"

    def test_hail_sizes(self):
        assert parse_hail_size('1.75" hail') == 1.75
        assert parse_hail_size("2 inches of hail") == 2.0
        assert parse_hail_size("HAIL 1.25") == 1.25
        assert parse_hail_size("0.88 diameter") == 0.88
        assert parse_hail_size("no ice here") is None

    def test_wind_speeds(self):
        assert parse_wind_speed("gusts to 65 MPH") == 65
        assert parse_wind_speed("wind: 45") == 45
        assert parse_wind_speed("calm") is None

    def test_knots_converted_to_mph(self):
        assert parse_wind_speed("52 knots") == 60


class TestCandidateFiltering:

    def test_rejects_navigation_chrome(self):
        assert not is_candidate_text("Previous 1.5\" hail 03/14/2024")
        assert not is_candidate_text("Maps | Campaigns")

    def test_rejects_out_of_range_lengths(self):
        assert not is_candidate_text("1\"")
        assert not is_candidate_text("Hail 1\" " + "y" * 600)
        assert is_candidate_text("Hail 1\" 03/14/2024")

    def test_parse_events_keeps_order_and_duplicates(self):
        texts = [
            'Hail: 1.5" on 03/14/2024',
            "Next page",
            "Wind 60 mph recorded",
            'Hail: 1.5" on 03/14/2024',
            "nothing useful at all",
        ]

        events = parse_events(texts)

        assert [e.type for e in events] == ["Hail", "Wind", "Hail"]
        assert events[0] == events[2]
