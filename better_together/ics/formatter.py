"""
Formatting primitives for iCalendar values.

Every datetime, offset and text value written by the line-based and the
icalendar-based builders goes through these functions, so both paths
produce identical text. None of them raise on absent input: they return
None and the caller omits the line.
"""

import re
from datetime import datetime

import pytz
from icalendar import vText
from lxml import etree
from lxml import html as lxml_html


ICS_DATETIME_FORMAT = "%Y%m%dT%H%M%S"

_BARE_LF = re.compile(r"(?<!\r)\n")

_UTF8_PARSER = lxml_html.HTMLParser(encoding="utf-8")

_BLOCK_TAGS = {"p", "div", "br", "li", "ul", "ol", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "tr"}


def now() -> datetime:
    """Current instant in UTC (patched in tests to freeze DTSTAMP)."""
    return datetime.now(pytz.UTC)


def timestamp() -> str:
    """Current UTC time as YYYYMMDDTHHMMSSZ, used for DTSTAMP."""
    return utc_time(now())


def utc_datetime(instant: datetime | None) -> datetime | None:
    """Convert to an aware UTC datetime without microseconds (naive = UTC)."""
    if instant is None:
        return None
    if instant.tzinfo is None:
        instant = pytz.UTC.localize(instant)
    return instant.astimezone(pytz.UTC).replace(microsecond=0)


def utc_time(instant: datetime | None) -> str | None:
    """
    Format an instant in UTC for ICS.

    Returns:
        "20240315T140000Z", or None if instant is None
    """
    utc = utc_datetime(instant)
    if utc is None:
        return None
    return utc.strftime(ICS_DATETIME_FORMAT) + "Z"


def local_datetime(instant: datetime | None, zone_name: str | None) -> datetime | None:
    """
    Wall-clock time of an instant in the named zone, as a naive datetime.

    Returns None if either argument is missing or the zone is unknown.
    """
    if instant is None or not zone_name:
        return None
    try:
        tz = pytz.timezone(zone_name)
    except pytz.UnknownTimeZoneError:
        return None
    return utc_datetime(instant).astimezone(tz).replace(tzinfo=None)


def local_time(instant: datetime | None, zone_name: str | None) -> str | None:
    """
    Format an instant as local time in the named zone, without a Z suffix.

    Local times are paired with a TZID parameter in ICS, so no offset is
    written. "2024-03-15 18:30 UTC" in America/New_York -> "20240315T143000".
    """
    local = local_datetime(instant, zone_name)
    if local is None:
        return None
    return format_naive(local)


def format_naive(value: datetime) -> str:
    """Format a datetime's wall clock as YYYYMMDDTHHMMSS."""
    return value.strftime(ICS_DATETIME_FORMAT)


def utc_offset(seconds: int | None) -> str | None:
    """
    Format an offset from UTC in seconds as ±HHMM.

    19800 -> "+0530", -18000 -> "-0500", 0 -> "+0000". Hours are the
    truncated quotient of the magnitude, minutes its remainder.
    """
    if seconds is None:
        return None
    sign = "-" if seconds < 0 else "+"
    hours, remainder = divmod(abs(int(seconds)), 3600)
    minutes = remainder // 60
    return f"{sign}{hours:02d}{minutes:02d}"


def normalize_line_endings(text: str | None) -> str | None:
    """Convert every bare LF to CRLF. Existing CRLF pairs are left alone."""
    if text is None:
        return None
    return _BARE_LF.sub("\r\n", text)


def plain_text(value: str | None) -> str | None:
    """
    Strip HTML from rich text, keeping block boundaries as newlines.

    Returns None for missing or blank input, and for markup with no
    content (a lone comment, for example).
    """
    if value is None or not value.strip():
        return None

    try:
        tree = _parse_html(value)
    except etree.ParserError:
        # Only comments or declarations, no content
        return None
    for element in tree.xpath("//script|//style"):
        element.drop_tree()
    for element in tree.iter():
        if element.tag in _BLOCK_TAGS and element is not tree:
            element.tail = "\n" + (element.tail or "")

    lines = [" ".join(line.split()) for line in tree.text_content().splitlines()]
    text = "\n".join(line for line in lines if line)
    return text or None


def _parse_html(value: str):
    try:
        return lxml_html.fromstring(value)
    except ValueError:
        # lxml only accepts an encoding declaration on bytes input
        return lxml_html.fromstring(value.encode("utf-8"), parser=_UTF8_PARSER)


def escape_text(value: str | None) -> str | None:
    """Escape a TEXT value (backslash, semicolon, comma, newline) per RFC 5545."""
    if value is None:
        return None
    return vText(value).to_ical().decode("utf-8")
