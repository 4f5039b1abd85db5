"""
Calendar export engine - platform-agnostic.
Used by the web API, and by anything else that needs ICS or JSON calendars.
"""

# Value types
from .recurrence import Recurrence, RecurrenceRule
from .types import Creator, Schedulable, Schedule

# Localization
from .translations import Translator, YamlTranslator, default_translator

# ICS export
from .ics import (
    Generator, EventBuilder, TimezoneResolver, PytzTimezoneProvider,
    IcsExportError, MissingScheduleError, RecurrenceRenderError, to_ics,
)

# Other formats
from .calendar_export import GoogleCalendarJson

# Subscription feeds
from .feeds import (
    CalendarFeed, FeedRegistry, get_registry, set_registry, clear_registry,
)

__all__ = [
    # Value types
    'Recurrence', 'RecurrenceRule', 'Creator', 'Schedulable', 'Schedule',
    # Localization
    'Translator', 'YamlTranslator', 'default_translator',
    # ICS export
    'Generator', 'EventBuilder', 'TimezoneResolver', 'PytzTimezoneProvider',
    'IcsExportError', 'MissingScheduleError', 'RecurrenceRenderError', 'to_ics',
    # Other formats
    'GoogleCalendarJson',
    # Feeds
    'CalendarFeed', 'FeedRegistry', 'get_registry', 'set_registry', 'clear_registry',
]
