"""
Shared constants for calendar export.
"""

# Zone names that never get a VTIMEZONE; times are written with a Z suffix
UTC_ZONES = ("UTC", "Etc/UTC")

# Window (years either side of the event) used when looking for DST
# transitions, so pre-standardization offsets are not picked up
DST_WINDOW_YEARS = 10

# Reminder triggers attached to every VEVENT, with their translation keys
REMINDERS = [
    ("-PT24H", "events.ics.reminders.24_hours"),
    ("-PT1H", "events.ics.reminders.1_hour"),
    ("PT0S", "events.ics.reminders.at_start"),
]

VIEW_DETAILS_KEY = "events.ics.view_details_url"

# RFC 5545 recurrence vocabulary
FREQUENCIES = ["daily", "weekly", "monthly", "yearly"]

WEEKDAY_CODES = ["MO", "TU", "WE", "TH", "FR", "SA", "SU"]

ICS_CONTENT_TYPE = "text/calendar; charset=UTF-8"
