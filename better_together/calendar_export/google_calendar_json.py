"""
Google Calendar JSON export.

Produces the shape of the Google Calendar API "events list" resource so a
feed can be consumed by tools that speak that format instead of ICS.
"""

import json
from collections.abc import Iterable
from datetime import datetime

import pytz

from better_together.ics import formatter
from better_together.ics.event_builder import recurrence_rule
from better_together.translations import Translator, default_translator
from better_together.types import Schedulable

SUMMARY_KEY = "events.calendar_export.summary"


class GoogleCalendarJson:
    """Builds a calendar#events document for one or more schedulables."""

    def __init__(
        self,
        schedulables: Schedulable | Iterable[Schedulable],
        translator: Translator | None = None,
    ):
        if isinstance(schedulables, Schedulable):
            schedulables = [schedulables]
        self.schedulables = list(schedulables)
        self.translator = translator or default_translator()

    def generate(self) -> str:
        """Serialize to JSON text."""
        return json.dumps(self.as_dict())

    def as_dict(self) -> dict:
        return {
            "kind": "calendar#events",
            "summary": self.translator.translate(SUMMARY_KEY),
            "items": [self.event_item(s) for s in self.schedulables],
        }

    def event_item(self, s: Schedulable) -> dict:
        item = {
            "kind": "calendar#event",
            "id": s.id,
            "summary": s.name,
            "description": formatter.plain_text(s.description),
            "start": self.event_time(s, s.starts_at),
        }
        if s.ends_at is not None:
            item["end"] = self.event_time(s, s.ends_at)
        if s.url:
            item["htmlLink"] = s.url
        if s.recurring:
            item["recurrence"] = self.recurrence_lines(s)
        item["creator"] = (
            {"email": s.creator.email, "displayName": s.creator.name}
            if s.creator
            else None
        )
        return item

    def event_time(self, s: Schedulable, instant: datetime | None) -> dict | None:
        """{"dateTime": ISO-8601 with offset, "timeZone": zone}."""
        utc = formatter.utc_datetime(instant)
        if utc is None:
            return None

        zone = "UTC" if s.uses_utc else s.timezone
        try:
            local = utc.astimezone(pytz.timezone(zone))
        except pytz.UnknownTimeZoneError:
            local = utc
        return {"dateTime": local.isoformat(), "timeZone": zone}

    def recurrence_lines(self, s: Schedulable) -> list[str]:
        """
        RRULE and EXDATE strings for the recurrence field.

        Raises:
            IcsExportError: If the schedule is missing or cannot be rendered
        """
        lines = [f"RRULE:{recurrence_rule(s).to_ical().decode('utf-8')}"]
        for exdate in s.exception_dates:
            lines.append(f"EXDATE;VALUE=DATE:{exdate.strftime('%Y%m%d')}")
        return lines
