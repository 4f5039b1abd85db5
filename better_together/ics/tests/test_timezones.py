"""Tests for the pytz-backed timezone provider."""

from datetime import datetime

import pytest
import pytz

from better_together.ics.timezones import PytzTimezoneProvider, UnknownTimezoneError


@pytest.fixture
def provider():
    return PytzTimezoneProvider()


def utc(*args):
    return datetime(*args, tzinfo=pytz.UTC)


class TestPeriodAt:
    def test_summer_in_new_york(self, provider):
        period = provider.period_at("America/New_York", utc(2024, 7, 1, 12))
        assert period.utc_offset == -14400
        assert period.base_offset == -18000
        assert period.dst is True
        assert period.has_daylight_adjustment

    def test_winter_in_new_york(self, provider):
        period = provider.period_at("America/New_York", utc(2024, 1, 15, 12))
        assert period.utc_offset == -18000
        assert period.base_offset == -18000
        assert period.dst is False

    def test_offset_helpers_agree(self, provider):
        instant = utc(2024, 7, 1, 12)
        assert provider.offset_at("Europe/London", instant) == 3600
        assert provider.base_offset_at("Europe/London", instant) == 0
        assert provider.is_dst("Europe/London", instant) is True

    def test_naive_instant_is_utc(self, provider):
        assert provider.offset_at("Asia/Kolkata", datetime(2024, 3, 15, 14)) == 19800

    def test_fixed_offset_zone(self, provider):
        period = provider.period_at("Etc/GMT+5", utc(2024, 7, 1))
        assert period.utc_offset == -18000
        assert period.dst is False


class TestTransitionsIn:
    def test_two_transitions_in_a_dst_year(self, provider):
        transitions = provider.transitions_in(
            "America/New_York", utc(2024, 1, 1), utc(2024, 12, 31)
        )
        assert [t.at for t in transitions] == [utc(2024, 3, 10, 7), utc(2024, 11, 3, 6)]

        spring, autumn = transitions
        assert (spring.offset_from, spring.offset_to) == (-18000, -14400)
        assert (spring.dst_from, spring.dst_to) == (False, True)
        assert (autumn.offset_from, autumn.offset_to) == (-14400, -18000)
        assert all(t.involves_dst for t in transitions)

    def test_bounds_are_inclusive(self, provider):
        moment = utc(2024, 3, 10, 7)
        transitions = provider.transitions_in("America/New_York", moment, moment)
        assert len(transitions) == 1

    def test_zone_without_recent_transitions(self, provider):
        assert provider.transitions_in("Asia/Tokyo", utc(2014, 1, 1), utc(2034, 1, 1)) == []

    @pytest.mark.parametrize("zone", ["UTC", "Etc/GMT+5"])
    def test_static_zones_have_none(self, provider, zone):
        assert provider.transitions_in(zone, utc(2000, 1, 1), utc(2030, 1, 1)) == []


class TestUnknownZones:
    def test_knows(self, provider):
        assert provider.knows("Europe/London")
        assert not provider.knows("Mars/Olympus_Mons")
        assert not provider.knows("")

    def test_lookup_raises(self, provider):
        with pytest.raises(UnknownTimezoneError):
            provider.period_at("Mars/Olympus_Mons", utc(2024, 1, 1))
