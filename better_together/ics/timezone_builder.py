"""
VTIMEZONE generation.

For a zone and a reference instant (the event start), emit a STANDARD
sub-component and, when the zone is on daylight time at that instant and
has observed DST within ten years of it, a DAYLIGHT sub-component.
Transitions older than the window are ignored so historical offsets (local
mean time and the like) do not leak into the output.
"""

import logging
from datetime import datetime

from dateutil.relativedelta import relativedelta
from icalendar import Component

from better_together.constants import DST_WINDOW_YEARS, UTC_ZONES

from . import formatter
from .timezones import (
    TimezonePeriod,
    TimezoneProvider,
    UnknownTimezoneError,
    default_provider,
)

logger = logging.getLogger(__name__)


class TimezoneResolver:
    """Builds the VTIMEZONE block for one zone around one instant."""

    def __init__(
        self,
        timezone: str | None,
        reference_time: datetime | None,
        provider: TimezoneProvider | None = None,
    ):
        self.timezone = timezone
        self.reference_time = reference_time
        self.provider = provider or default_provider()

    def build(self) -> list[str]:
        """
        Generate VTIMEZONE lines.

        Returns:
            Lines from BEGIN:VTIMEZONE to END:VTIMEZONE, or an empty list
            for UTC, a missing zone or a zone the database does not know
        """
        if not self.timezone or self.timezone in UTC_ZONES:
            return []

        reference = formatter.utc_datetime(self.reference_time or formatter.now())
        try:
            period = self.provider.period_at(self.timezone, reference)
            recent_dst = self._recent_dst(reference)
            standard = self._standard_component(period, reference)
        except UnknownTimezoneError:
            logger.warning(f"Unknown timezone {self.timezone!r}, omitting VTIMEZONE")
            return []

        lines = ["BEGIN:VTIMEZONE", f"TZID:{self.timezone}"]
        lines.extend(standard)
        if recent_dst:
            lines.extend(self._daylight_component(period, reference))
        lines.append("END:VTIMEZONE")
        return lines

    def build_component(self) -> Component | None:
        """The same block as an icalendar component, or None if empty."""
        lines = self.build()
        if not lines:
            return None
        return Component.from_ical("\r\n".join(lines))

    def _window(self, reference: datetime) -> tuple[datetime, datetime]:
        span = relativedelta(years=DST_WINDOW_YEARS)
        return reference - span, reference + span

    def _recent_dst(self, reference: datetime) -> bool:
        """Whether any transition within the window moves into or out of DST."""
        start, end = self._window(reference)
        transitions = self.provider.transitions_in(self.timezone, start, end)
        return any(transition.involves_dst for transition in transitions)

    def _dtstart(self, reference: datetime) -> str:
        return formatter.local_time(reference, self.timezone)

    def _standard_component(self, period: TimezonePeriod, reference: datetime) -> list[str]:
        # Most recent transition at or before the reference, within the window
        start, _ = self._window(reference)
        transitions = self.provider.transitions_in(self.timezone, start, reference)
        transition = transitions[-1] if transitions else None

        if transition is not None and transition.offset_from != period.utc_offset:
            from_offset = transition.offset_from
        else:
            from_offset = period.utc_offset

        return [
            "BEGIN:STANDARD",
            f"DTSTART:{self._dtstart(reference)}",
            f"TZOFFSETFROM:{formatter.utc_offset(from_offset)}",
            f"TZOFFSETTO:{formatter.utc_offset(period.base_offset)}",
            "END:STANDARD",
        ]

    def _daylight_component(self, period: TimezonePeriod, reference: datetime) -> list[str]:
        if not period.has_daylight_adjustment:
            return []

        return [
            "BEGIN:DAYLIGHT",
            f"DTSTART:{self._dtstart(reference)}",
            f"TZOFFSETFROM:{formatter.utc_offset(period.base_offset)}",
            f"TZOFFSETTO:{formatter.utc_offset(period.utc_offset)}",
            "END:DAYLIGHT",
        ]


TimezoneBuilder = TimezoneResolver
