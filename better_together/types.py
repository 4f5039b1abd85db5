"""
Type definitions for the objects exported to calendars.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from .constants import UTC_ZONES
from .recurrence import Recurrence


class Schedule(Protocol):
    """Anything that can render itself as RFC 5545 RRULE text."""

    def to_ical(self) -> str: ...


@dataclass
class Creator:
    """Person who created an event (used by the JSON export)."""

    name: str
    email: str | None = None


@dataclass
class Schedulable:
    """
    An event as seen by the exporters.

    Optional fields are None when absent; exporters omit the matching
    lines instead of probing the object. Naive datetimes are treated as UTC.
    """

    id: int | str
    name: str
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    timezone: str | None = None  # IANA name; None or UTC means times are written in UTC
    description: str | None = None  # May contain HTML
    url: str | None = None
    recurring: bool = False
    schedule: Schedule | None = None
    recurrence: Recurrence | None = None
    creator: Creator | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        # A recurrence with a rule implies both the schedule and the flag
        if self.recurrence is not None and self.recurrence.recurring:
            if self.schedule is None:
                self.schedule = self.recurrence.schedule
            self.recurring = True
        elif self.schedule is not None:
            self.recurring = True

    @property
    def uses_utc(self) -> bool:
        return not self.timezone or self.timezone in UTC_ZONES

    @property
    def exception_dates(self) -> list:
        if self.recurrence is None:
            return []
        return list(self.recurrence.exception_dates)

    @property
    def last_modified(self) -> datetime | None:
        if self.updated_at is None:
            return None
        if self.updated_at.tzinfo is None:
            return self.updated_at.replace(tzinfo=timezone.utc)
        return self.updated_at
