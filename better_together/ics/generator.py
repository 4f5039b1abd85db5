"""
ICS document generation.

Assembles a VCALENDAR from one or more schedulables: calendar properties,
one VTIMEZONE per distinct non-UTC zone (before any event, as RFC 5545
requires), then one VEVENT per schedulable. The output always uses CRLF.
"""

import logging
from collections.abc import Iterable

from icalendar import Calendar

from better_together.config import get_prodid
from better_together.translations import Translator
from better_together.types import Schedulable

from . import formatter
from .event_builder import EventBuilder
from .timezone_builder import TimezoneResolver
from .timezones import TimezoneProvider

logger = logging.getLogger(__name__)


class Generator:
    """
    Builds a complete ICS document.

    Accepts a single schedulable or an iterable of them. Each call to
    generate() is independent; nothing is cached between calls.
    """

    def __init__(
        self,
        schedulables: Schedulable | Iterable[Schedulable],
        translator: Translator | None = None,
        provider: TimezoneProvider | None = None,
    ):
        if isinstance(schedulables, Schedulable):
            schedulables = [schedulables]
        self.schedulables = list(schedulables)
        self.translator = translator
        self.provider = provider

    def generate(self) -> str:
        """
        Generate the ICS text.

        Raises:
            IcsExportError: If any schedulable cannot be exported; no partial
                document is returned
        """
        calendar = Calendar()
        calendar.add("version", "2.0")
        calendar.add("prodid", get_prodid())
        calendar.add("calscale", "GREGORIAN")
        # PUBLISH marks a static calendar rather than an invitation needing RSVP
        calendar.add("method", "PUBLISH")

        zones = self.timezone_references()
        for zone, reference in zones.items():
            component = TimezoneResolver(zone, reference, self.provider).build_component()
            if component is not None:
                calendar.add_component(component)

        for schedulable in self.schedulables:
            builder = EventBuilder(schedulable, self.translator)
            calendar.add_component(builder.build_icalendar_event())

        logger.debug(
            f"Generated calendar with {len(self.schedulables)} events "
            f"and {len(zones)} timezones"
        )
        return formatter.normalize_line_endings(calendar.to_ical(sorted=False).decode("utf-8"))

    def timezone_references(self) -> dict:
        """
        Distinct non-UTC zones in first-seen order.

        Returns:
            Dict of zone name -> start time of the first schedulable using it
        """
        zones = {}
        for schedulable in self.schedulables:
            if schedulable.uses_utc or schedulable.timezone in zones:
                continue
            zones[schedulable.timezone] = schedulable.starts_at
        return zones


def to_ics(schedulables: Schedulable | Iterable[Schedulable], **kwargs) -> str:
    """Generate an ICS document for one or more schedulables."""
    return Generator(schedulables, **kwargs).generate()
