"""
Timezone database access for VTIMEZONE generation.

TimezoneProvider is the small interface the resolver needs: offsets at an
instant and the transitions inside a window. PytzTimezoneProvider reads
them from pytz's compiled transition tables. Nothing here is cached between
calls beyond what pytz itself caches, and the provider holds no state, so
one instance can be shared across threads.
"""

import bisect
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

import pytz


UnknownTimezoneError = pytz.UnknownTimeZoneError


@dataclass(frozen=True)
class TimezoneTransition:
    """A change of UTC offset. Offsets are in seconds east of UTC."""

    at: datetime  # aware, UTC
    offset_from: int
    offset_to: int
    dst_from: bool
    dst_to: bool

    @property
    def involves_dst(self) -> bool:
        return self.dst_from or self.dst_to


@dataclass(frozen=True)
class TimezonePeriod:
    """Offsets in effect at one instant."""

    utc_offset: int  # observed offset, including any DST adjustment
    base_offset: int  # standard (non-DST) offset
    dst: bool

    @property
    def has_daylight_adjustment(self) -> bool:
        return self.utc_offset != self.base_offset


class TimezoneProvider(Protocol):
    def knows(self, zone: str) -> bool: ...

    def period_at(self, zone: str, instant: datetime) -> TimezonePeriod: ...

    def offset_at(self, zone: str, instant: datetime) -> int: ...

    def base_offset_at(self, zone: str, instant: datetime) -> int: ...

    def is_dst(self, zone: str, instant: datetime) -> bool: ...

    def transitions_in(
        self, zone: str, start: datetime, end: datetime
    ) -> list[TimezoneTransition]: ...


def _seconds(delta: timedelta | None) -> int:
    if delta is None:
        return 0
    return int(delta.total_seconds())


def _naive_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(pytz.UTC).replace(tzinfo=None)


class PytzTimezoneProvider:
    """TimezoneProvider backed by pytz."""

    def zone(self, name: str) -> pytz.BaseTzInfo:
        """
        Look up a zone by IANA name.

        Raises:
            UnknownTimezoneError: If the name is not in the database
        """
        if not name:
            raise UnknownTimezoneError(name)
        return pytz.timezone(name)

    def knows(self, zone: str) -> bool:
        try:
            self.zone(zone)
        except UnknownTimezoneError:
            return False
        return True

    def period_at(self, zone: str, instant: datetime) -> TimezonePeriod:
        local = pytz.UTC.localize(_naive_utc(instant)).astimezone(self.zone(zone))
        utc_offset = _seconds(local.utcoffset())
        dst = _seconds(local.dst())
        return TimezonePeriod(
            utc_offset=utc_offset,
            base_offset=utc_offset - dst,
            dst=dst != 0,
        )

    def offset_at(self, zone: str, instant: datetime) -> int:
        return self.period_at(zone, instant).utc_offset

    def base_offset_at(self, zone: str, instant: datetime) -> int:
        return self.period_at(zone, instant).base_offset

    def is_dst(self, zone: str, instant: datetime) -> bool:
        return self.period_at(zone, instant).dst

    def transitions_in(
        self, zone: str, start: datetime, end: datetime
    ) -> list[TimezoneTransition]:
        """
        Transitions with start <= instant <= end, oldest first.

        Fixed-offset zones (and UTC) have none.
        """
        tz = self.zone(zone)
        # Only DstTzInfo zones carry transition tables
        times = getattr(tz, "_utc_transition_times", None)
        infos = getattr(tz, "_transition_info", None)
        if not times or not infos:
            return []

        lo = max(bisect.bisect_left(times, _naive_utc(start)), 1)
        hi = bisect.bisect_right(times, _naive_utc(end))

        transitions = []
        for index in range(lo, hi):
            previous_offset, previous_dst, _ = infos[index - 1]
            offset, dst, _ = infos[index]
            transitions.append(
                TimezoneTransition(
                    at=pytz.UTC.localize(times[index]),
                    offset_from=_seconds(previous_offset),
                    offset_to=_seconds(offset),
                    dst_from=_seconds(previous_dst) != 0,
                    dst_to=_seconds(dst) != 0,
                )
            )
        return transitions


_default_provider = PytzTimezoneProvider()


def default_provider() -> PytzTimezoneProvider:
    return _default_provider
