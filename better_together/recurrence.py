"""
Recurrence rules and exception dates for schedulable events.

A RecurrenceRule renders to (and parses from) RFC 5545 RRULE text using
icalendar's vRecur. A Recurrence pairs a rule with the dates on which an
occurrence is cancelled; those become EXDATE entries on export.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time

from dateutil import rrule as du_rrule
from icalendar import vRecur

from .constants import FREQUENCIES, WEEKDAY_CODES


_DU_FREQUENCIES = {
    "daily": du_rrule.DAILY,
    "weekly": du_rrule.WEEKLY,
    "monthly": du_rrule.MONTHLY,
    "yearly": du_rrule.YEARLY,
}

_DU_WEEKDAYS = {
    "MO": du_rrule.MO,
    "TU": du_rrule.TU,
    "WE": du_rrule.WE,
    "TH": du_rrule.TH,
    "FR": du_rrule.FR,
    "SA": du_rrule.SA,
    "SU": du_rrule.SU,
}


@dataclass
class RecurrenceRule:
    """A single RRULE: frequency, interval, weekdays and an optional bound."""

    frequency: str
    interval: int = 1
    weekdays: list[str] = field(default_factory=list)
    count: int | None = None
    until: date | datetime | None = None

    def __post_init__(self):
        self.frequency = self.frequency.lower()
        if self.frequency not in FREQUENCIES:
            raise ValueError(f"Unknown recurrence frequency: {self.frequency}")
        if self.interval < 1:
            raise ValueError(f"Recurrence interval must be positive: {self.interval}")

        self.weekdays = [day.upper() for day in self.weekdays]
        invalid = [day for day in self.weekdays if day not in WEEKDAY_CODES]
        if invalid:
            raise ValueError(f"Unknown weekday codes: {', '.join(invalid)}")

        # RFC 5545: COUNT and UNTIL must not occur in the same rule
        if self.count is not None and self.until is not None:
            raise ValueError("A recurrence rule cannot have both count and until")

    def to_recur(self) -> vRecur:
        """Build the icalendar value for this rule."""
        parts = {"freq": self.frequency.upper()}
        if self.until is not None:
            parts["until"] = self.until
        if self.count is not None:
            parts["count"] = self.count
        if self.interval != 1:
            parts["interval"] = self.interval
        if self.weekdays:
            parts["byday"] = list(self.weekdays)
        return vRecur(parts)

    def to_ical(self) -> str:
        """Render as RRULE text, e.g. "FREQ=WEEKLY;BYDAY=MO,WE"."""
        return self.to_recur().to_ical().decode("utf-8")

    @classmethod
    def from_ical(cls, text: str) -> "RecurrenceRule":
        """
        Parse RRULE text (with or without the "RRULE:" prefix).

        Raises:
            ValueError: If the text has no FREQ or uses unsupported values
        """
        if text.upper().startswith("RRULE:"):
            text = text[len("RRULE:"):]
        recur = vRecur.from_ical(text)
        if "FREQ" not in recur:
            raise ValueError(f"Recurrence rule has no FREQ: {text}")

        count = recur.get("COUNT")
        until = recur.get("UNTIL")
        return cls(
            frequency=str(recur["FREQ"][0]),
            interval=int(recur.get("INTERVAL", [1])[0]),
            weekdays=[str(day) for day in recur.get("BYDAY", [])],
            count=int(count[0]) if count else None,
            until=until[0] if until else None,
        )

    def to_rrule(self, dtstart: datetime, tzinfo=None) -> du_rrule.rrule:
        """
        Build a dateutil rrule anchored at a naive (wall-clock) dtstart.

        An aware UNTIL is converted to the wall clock of tzinfo first.
        """
        until = self.until
        if isinstance(until, datetime):
            if until.tzinfo is not None:
                if tzinfo is not None:
                    until = until.astimezone(tzinfo)
                until = until.replace(tzinfo=None)
        elif isinstance(until, date):
            until = datetime.combine(until, time.max)

        return du_rrule.rrule(
            _DU_FREQUENCIES[self.frequency],
            dtstart=dtstart,
            interval=self.interval,
            byweekday=[_DU_WEEKDAYS[day] for day in self.weekdays] or None,
            count=self.count,
            until=until,
        )


@dataclass
class Recurrence:
    """
    Recurrence attached to a schedulable.

    exception_dates are kept in insertion order without duplicates; each one
    cancels the occurrence falling on that (local) date.
    """

    rule: RecurrenceRule | None = None
    exception_dates: list[date] = field(default_factory=list)
    ends_on: date | None = None

    def __post_init__(self):
        unique = []
        for exdate in self.exception_dates:
            exdate = _as_date(exdate)
            if exdate not in unique:
                unique.append(exdate)
        self.exception_dates = unique

    @property
    def schedule(self) -> RecurrenceRule | None:
        return self.rule

    @property
    def recurring(self) -> bool:
        return self.rule is not None

    def add_exception_date(self, exdate: date) -> None:
        """Exclude the occurrence on this date (no-op if already excluded)."""
        exdate = _as_date(exdate)
        if exdate not in self.exception_dates:
            self.exception_dates.append(exdate)

    def remove_exception_date(self, exdate: date) -> None:
        exdate = _as_date(exdate)
        if exdate in self.exception_dates:
            self.exception_dates.remove(exdate)

    def occurrences_between(
        self, dtstart: datetime, start: datetime, end: datetime
    ) -> list[datetime]:
        """
        Expand the rule and return occurrences within [start, end].

        Expansion happens on the wall clock of dtstart, so a 10:00 event stays
        at 10:00 local time across DST changes.

        Args:
            dtstart: First occurrence of the series
            start: Window start (same awareness as dtstart)
            end: Window end (same awareness as dtstart)

        Returns:
            Occurrences in order, excluding exception dates and anything
            after ends_on
        """
        if self.rule is None:
            return []

        tzinfo = dtstart.tzinfo
        occurrences = []
        for naive in self.rule.to_rrule(dtstart.replace(tzinfo=None), tzinfo):
            occurrence = _attach(naive, tzinfo)
            if occurrence > end:
                break
            if self.ends_on and occurrence.date() > self.ends_on:
                break
            if occurrence < start or occurrence.date() in self.exception_dates:
                continue
            occurrences.append(occurrence)
        return occurrences

    def next_occurrence(self, dtstart: datetime, after: datetime) -> datetime | None:
        """First occurrence strictly after `after` that is not cancelled."""
        if self.rule is None:
            return None

        tzinfo = dtstart.tzinfo
        for naive in self.rule.to_rrule(dtstart.replace(tzinfo=None), tzinfo):
            occurrence = _attach(naive, tzinfo)
            if self.ends_on and occurrence.date() > self.ends_on:
                return None
            if occurrence <= after or occurrence.date() in self.exception_dates:
                continue
            return occurrence
        return None


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _attach(naive: datetime, tzinfo) -> datetime:
    """Give a wall-clock datetime the zone of the series start."""
    if tzinfo is None:
        return naive
    # pytz zones need localize() to pick the right DST offset
    localize = getattr(tzinfo, "localize", None)
    if localize is not None:
        return localize(naive)
    return naive.replace(tzinfo=tzinfo)
