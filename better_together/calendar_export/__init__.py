"""Calendar export formats other than ICS."""

from .google_calendar_json import GoogleCalendarJson

__all__ = ["GoogleCalendarJson"]
