"""
VEVENT generation for one schedulable.

Two outputs share the same formatting:
- build() returns plain ICS lines (timing, summary, description, URL)
- build_icalendar_event() fills an icalendar.Event and additionally adds
  RRULE, EXDATE and the three reminder VALARMs
"""

from datetime import datetime

from icalendar import Alarm, Event, vRecur
from icalendar.prop import vInline

from better_together.config import get_uid_domain
from better_together.constants import REMINDERS, VIEW_DETAILS_KEY
from better_together.translations import Translator, default_translator
from better_together.types import Schedulable

from . import formatter


class IcsExportError(Exception):
    """Base exception for calendar export errors."""
    pass


class MissingScheduleError(IcsExportError):
    """Schedulable reports itself recurring but has no schedule."""
    pass


class RecurrenceRenderError(IcsExportError):
    """The schedule could not be rendered as an RRULE."""
    pass


def event_uid(schedulable: Schedulable) -> str:
    return f"event-{schedulable.id}@{get_uid_domain()}"


def recurrence_rule(schedulable: Schedulable) -> vRecur:
    """
    Render the schedulable's schedule as an RRULE value.

    Raises:
        MissingScheduleError: If the schedulable is recurring without a schedule
        RecurrenceRenderError: If the schedule cannot be rendered or parsed
    """
    if schedulable.schedule is None:
        raise MissingScheduleError(f"Event {schedulable.id} is recurring but has no schedule")

    try:
        rule = schedulable.schedule.to_ical()
        if rule.upper().startswith("RRULE:"):
            rule = rule[len("RRULE:"):]
        return vRecur.from_ical(rule)
    except Exception as e:
        raise RecurrenceRenderError(
            f"Could not render recurrence rule for event {schedulable.id}: {e}"
        ) from e


class EventBuilder:
    """Serializes a Schedulable as a VEVENT."""

    def __init__(self, schedulable: Schedulable, translator: Translator | None = None):
        self.schedulable = schedulable
        self.translator = translator or default_translator()

    def build(self) -> list[str]:
        """
        Generate VEVENT property lines (without BEGIN/END).

        Returns:
            DTSTAMP, UID, SUMMARY, optional DESCRIPTION, DTSTART/DTEND when
            set and optional URL, in that order
        """
        s = self.schedulable
        lines = [
            f"DTSTAMP:{formatter.timestamp()}",
            f"UID:{event_uid(s)}",
            f"SUMMARY:{formatter.escape_text(s.name)}",
        ]

        description = self.description()
        if description is not None:
            lines.append(f"DESCRIPTION:{formatter.escape_text(description)}")

        for field, instant in (("DTSTART", s.starts_at), ("DTEND", s.ends_at)):
            if instant is None:
                continue
            if s.uses_utc:
                lines.append(f"{field}:{formatter.utc_time(instant)}")
            else:
                wall_clock = formatter.format_naive(self.wall_clock(instant))
                lines.append(f"{field};TZID={s.timezone}:{wall_clock}")

        if s.url:
            lines.append(f"URL:{s.url}")
        return lines

    def build_icalendar_event(self, target: Event | None = None) -> Event:
        """
        Populate an icalendar Event for this schedulable.

        Args:
            target: Event to fill in; a new one is created if omitted

        Returns:
            The populated event

        Raises:
            MissingScheduleError: If the schedulable is recurring without a schedule
            RecurrenceRenderError: If the schedule cannot be rendered as an RRULE
        """
        s = self.schedulable
        event = target if target is not None else Event()

        event.add("dtstamp", formatter.now())
        event.add("uid", event_uid(s))
        event.add("summary", s.name)

        description = self.description()
        if description is not None:
            event.add("description", description)

        for field, instant in (("dtstart", s.starts_at), ("dtend", s.ends_at)):
            if instant is None:
                continue
            if s.uses_utc:
                event.add(field, formatter.utc_datetime(instant))
            else:
                event.add(field, self.wall_clock(instant), parameters={"TZID": s.timezone})

        if s.url:
            event.add("url", s.url)

        if s.recurring:
            self.add_recurrence_rule(event)

        self.add_reminders(event)
        return event

    def description(self) -> str | None:
        """Plain-text description with the "view details" link appended."""
        s = self.schedulable
        text = formatter.plain_text(s.description)
        if text is None:
            return None
        if s.url:
            details = self.translator.translate(VIEW_DETAILS_KEY, url=s.url)
            text = f"{text}\n\n{details}"
        return text

    def wall_clock(self, instant: datetime) -> datetime:
        """
        Local time in the schedulable's zone.

        A zone the database does not know falls back to the UTC wall clock;
        the TZID still names the zone and clients pick their best match.
        """
        local = formatter.local_datetime(instant, self.schedulable.timezone)
        if local is None:
            local = formatter.utc_datetime(instant).replace(tzinfo=None)
        return local

    def add_recurrence_rule(self, event: Event) -> None:
        s = self.schedulable
        event.add("rrule", recurrence_rule(s))
        for exdate in s.exception_dates:
            event.add("exdate", exdate)

    def add_reminders(self, event: Event) -> None:
        """Attach the 24 hour, 1 hour and at-start DISPLAY alarms."""
        for trigger, key in REMINDERS:
            alarm = Alarm()
            alarm.add("action", "DISPLAY")
            # Keep the trigger text exactly as written (-PT24H, not -P1D)
            alarm.add("trigger", vInline(trigger))
            alarm.add(
                "description",
                self.translator.translate(key, event_name=self.schedulable.name),
            )
            event.add_component(alarm)
