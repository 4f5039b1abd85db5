"""
Calendar subscription feeds.

A feed is a named collection of events reachable with a subscription token.
Feeds carry the validators (ETag, Last-Modified) that let calendar clients
poll without re-downloading unchanged calendars.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

from .types import Schedulable

logger = logging.getLogger(__name__)


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    # HTTP dates have one-second resolution
    return value.astimezone(timezone.utc).replace(microsecond=0)


@dataclass
class CalendarFeed:
    """Events published together under one subscription URL."""

    id: str
    name: str
    subscription_token: str = field(default_factory=lambda: secrets.token_urlsafe(24))
    events: list[Schedulable] = field(default_factory=list)
    updated_at: datetime | None = None

    @property
    def last_modified(self) -> datetime | None:
        """Latest change to the feed or any of its events."""
        stamps = [_utc(self.updated_at)] if self.updated_at else []
        stamps.extend(_utc(e.last_modified) for e in self.events if e.last_modified)
        return max(stamps) if stamps else None

    def etag(self, variant: str = "ics") -> str:
        """
        Weak validator for one representation of the feed.

        Derived from every event field that reaches the exported calendar,
        not from the rendered body (which carries a fresh DTSTAMP on every
        request). Custom schedule objects contribute their repr.
        """
        digest = hashlib.sha256(f"{variant}:{self.id}:{self.name}".encode())
        for event in self.events:
            digest.update(
                "|".join(
                    str(part)
                    for part in (
                        event.id,
                        event.name,
                        event.starts_at,
                        event.ends_at,
                        event.timezone,
                        event.description,
                        event.url,
                        event.schedule,
                        event.exception_dates,
                        event.creator,
                        event.last_modified,
                    )
                ).encode()
            )
        last_modified = self.last_modified
        if last_modified is not None:
            digest.update(last_modified.isoformat().encode())
        return f'W/"{digest.hexdigest()[:32]}"'

    def token_matches(self, token: str | None) -> bool:
        if not token:
            return False
        return secrets.compare_digest(token, self.subscription_token)


class FeedRegistry:
    """In-memory lookup of feeds and standalone events."""

    def __init__(self):
        self._feeds: dict[str, CalendarFeed] = {}
        self._events: dict[str, Schedulable] = {}

    def add_feed(self, feed: CalendarFeed) -> CalendarFeed:
        self._feeds[str(feed.id)] = feed
        for event in feed.events:
            self.add_event(event)
        return feed

    def get_feed(self, feed_id) -> CalendarFeed | None:
        return self._feeds.get(str(feed_id))

    def add_event(self, event: Schedulable) -> Schedulable:
        self._events[str(event.id)] = event
        return event

    def get_event(self, event_id) -> Schedulable | None:
        return self._events.get(str(event_id))


# Process-wide registry served by the web API
_registry: FeedRegistry | None = None


def get_registry() -> FeedRegistry:
    """Get the feed registry, creating an empty one on first use."""
    global _registry
    if _registry is None:
        _registry = FeedRegistry()
    return _registry


def set_registry(registry: FeedRegistry) -> None:
    """Replace the feed registry (used at startup and by tests)."""
    global _registry
    _registry = registry


def clear_registry() -> None:
    global _registry
    _registry = None


def http_date(value: datetime) -> str:
    """Format for the Last-Modified header."""
    return format_datetime(_utc(value), usegmt=True)


def not_modified(
    etag: str,
    last_modified: datetime | None,
    if_none_match: str | None = None,
    if_modified_since: str | None = None,
) -> bool:
    """
    Evaluate conditional request headers (RFC 9110 section 13.2.2).

    If-None-Match takes precedence; If-Modified-Since is only consulted when
    it is absent. Unparseable dates are ignored.
    """
    if if_none_match:
        candidates = [tag.strip() for tag in if_none_match.split(",")]
        if "*" in candidates:
            return True
        bare = etag.removeprefix("W/")
        return any(tag.removeprefix("W/") == bare for tag in candidates)

    if if_modified_since and last_modified is not None:
        try:
            since = parsedate_to_datetime(if_modified_since)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring unparseable If-Modified-Since: {if_modified_since!r}")
            return False
        return _utc(last_modified) <= _utc(since)

    return False
