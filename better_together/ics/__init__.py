"""iCalendar (RFC 5545) export: formatting, VTIMEZONE, VEVENT and VCALENDAR."""

from . import formatter
from .timezones import (
    TimezoneTransition,
    TimezonePeriod,
    TimezoneProvider,
    PytzTimezoneProvider,
    UnknownTimezoneError,
    default_provider,
)
from .timezone_builder import TimezoneResolver, TimezoneBuilder
from .event_builder import (
    EventBuilder,
    IcsExportError,
    MissingScheduleError,
    RecurrenceRenderError,
    event_uid,
    recurrence_rule,
)
from .generator import Generator, to_ics

__all__ = [
    "formatter",
    "TimezoneTransition",
    "TimezonePeriod",
    "TimezoneProvider",
    "PytzTimezoneProvider",
    "UnknownTimezoneError",
    "default_provider",
    "TimezoneResolver",
    "TimezoneBuilder",
    "EventBuilder",
    "IcsExportError",
    "MissingScheduleError",
    "RecurrenceRenderError",
    "event_uid",
    "recurrence_rule",
    "Generator",
    "to_ics",
]
