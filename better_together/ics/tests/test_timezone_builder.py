"""Tests for VTIMEZONE generation."""

import logging
from datetime import datetime
from unittest.mock import patch

import pytest
import pytz

from better_together.ics.timezone_builder import TimezoneResolver
from better_together.ics.timezones import TimezonePeriod, TimezoneTransition


def utc(*args):
    return datetime(*args, tzinfo=pytz.UTC)


class StubProvider:
    """Provider with a fixed period and transition list."""

    def __init__(self, period, transitions):
        self.period = period
        self.transitions = transitions
        self.windows = []

    def period_at(self, zone, instant):
        return self.period

    def transitions_in(self, zone, start, end):
        self.windows.append((start, end))
        return [t for t in self.transitions if start <= t.at <= end]


class TestUtcZones:
    @pytest.mark.parametrize("zone", ["UTC", "Etc/UTC", None, ""])
    @pytest.mark.parametrize("reference", [utc(2024, 3, 15, 14), utc(1990, 7, 1), None])
    def test_no_vtimezone(self, zone, reference):
        assert TimezoneResolver(zone, reference).build() == []

    def test_no_component(self):
        assert TimezoneResolver("UTC", utc(2024, 3, 15)).build_component() is None


class TestDaylightZones:
    def test_new_york_during_daylight_time(self):
        lines = TimezoneResolver("America/New_York", utc(2024, 3, 15, 14)).build()
        assert lines == [
            "BEGIN:VTIMEZONE",
            "TZID:America/New_York",
            "BEGIN:STANDARD",
            "DTSTART:20240315T100000",
            "TZOFFSETFROM:-0500",
            "TZOFFSETTO:-0500",
            "END:STANDARD",
            "BEGIN:DAYLIGHT",
            "DTSTART:20240315T100000",
            "TZOFFSETFROM:-0500",
            "TZOFFSETTO:-0400",
            "END:DAYLIGHT",
            "END:VTIMEZONE",
        ]

    def test_new_york_during_standard_time(self):
        lines = TimezoneResolver("America/New_York", utc(2024, 1, 15, 15)).build()
        assert "DTSTART:20240115T100000" in lines
        # Last change (November) came from daylight time
        assert "TZOFFSETFROM:-0400" in lines
        assert "TZOFFSETTO:-0500" in lines
        assert "BEGIN:DAYLIGHT" not in lines

    def test_london_summer(self):
        lines = TimezoneResolver("Europe/London", utc(2024, 7, 1, 12)).build()
        daylight = lines[lines.index("BEGIN:DAYLIGHT"):lines.index("END:DAYLIGHT")]
        assert "TZOFFSETFROM:+0000" in daylight
        assert "TZOFFSETTO:+0100" in daylight

    def test_missing_reference_uses_current_time(self):
        with patch("better_together.ics.formatter.now", return_value=utc(2024, 3, 15, 14)):
            lines = TimezoneResolver("America/New_York", None).build()
        assert "DTSTART:20240315T100000" in lines
        assert "BEGIN:DAYLIGHT" in lines


class TestZonesWithoutDaylightTime:
    def test_tokyo_has_only_standard(self):
        lines = TimezoneResolver("Asia/Tokyo", utc(2024, 3, 15, 14)).build()
        assert lines == [
            "BEGIN:VTIMEZONE",
            "TZID:Asia/Tokyo",
            "BEGIN:STANDARD",
            "DTSTART:20240315T230000",
            "TZOFFSETFROM:+0900",
            "TZOFFSETTO:+0900",
            "END:STANDARD",
            "END:VTIMEZONE",
        ]

    def test_historical_offsets_are_ignored(self):
        # Kolkata last changed offset in 1945, outside the ten-year window
        lines = TimezoneResolver("Asia/Kolkata", utc(2024, 3, 15, 14)).build()
        assert "TZOFFSETFROM:+0530" in lines
        assert "TZOFFSETTO:+0530" in lines
        assert "BEGIN:DAYLIGHT" not in lines


class TestWindow:
    def test_transition_just_outside_window_is_ignored(self):
        reference = utc(2024, 3, 15)
        old = TimezoneTransition(utc(2014, 3, 1), 7200, 3600, True, False)
        provider = StubProvider(TimezonePeriod(3600, 3600, False), [old])

        lines = TimezoneResolver("Europe/Berlin", reference, provider).build()

        assert "TZOFFSETFROM:+0100" in lines
        assert "BEGIN:DAYLIGHT" not in lines
        assert provider.windows[0] == (utc(2014, 3, 15), utc(2034, 3, 15))

    def test_transition_to_same_offset_uses_observed(self):
        reference = utc(2024, 3, 15)
        # Rename-only change: offset stays the same
        same = TimezoneTransition(utc(2020, 1, 1), 3600, 3600, False, False)
        provider = StubProvider(TimezonePeriod(3600, 3600, False), [same])

        lines = TimezoneResolver("Europe/Berlin", reference, provider).build()

        assert "TZOFFSETFROM:+0100" in lines

    def test_upcoming_dst_counts_as_recent(self):
        reference = utc(2024, 3, 15)
        upcoming = TimezoneTransition(utc(2030, 3, 1), 3600, 7200, False, True)
        # Observed offset differs from base so a DAYLIGHT block is possible
        provider = StubProvider(TimezonePeriod(7200, 3600, True), [upcoming])

        lines = TimezoneResolver("Europe/Berlin", reference, provider).build()

        assert "BEGIN:DAYLIGHT" in lines


class TestUnknownZone:
    def test_returns_empty_and_logs(self, caplog):
        with caplog.at_level(logging.WARNING, logger="better_together.ics.timezone_builder"):
            lines = TimezoneResolver("Mars/Olympus_Mons", utc(2024, 3, 15)).build()

        assert lines == []
        assert "Mars/Olympus_Mons" in caplog.text


class TestBuildComponent:
    def test_parses_to_vtimezone(self):
        component = TimezoneResolver("America/New_York", utc(2024, 3, 15, 14)).build_component()

        assert component.name == "VTIMEZONE"
        assert [sub.name for sub in component.subcomponents] == ["STANDARD", "DAYLIGHT"]
        text = component.to_ical().decode()
        assert "TZID:America/New_York" in text
        assert "TZOFFSETTO:-0400" in text
