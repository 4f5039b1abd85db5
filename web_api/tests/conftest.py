# web_api/tests/conftest.py
"""Pytest fixtures for web API tests.

Installs an in-memory feed registry with a small community calendar so the
calendar routes can be exercised without any storage backend.
"""

from datetime import datetime

import pytest
import pytz

from better_together.feeds import CalendarFeed, FeedRegistry, set_registry, clear_registry
from better_together.recurrence import Recurrence, RecurrenceRule
from better_together.types import Schedulable

FEED_TOKEN = "test-subscription-token"


class BrokenSchedule:
    def to_ical(self):
        raise RuntimeError("schedule storage unavailable")


@pytest.fixture(autouse=True)
def api_test_registry(monkeypatch):
    """Set up a registry with a working feed and two feeds that fail to export.

    This fixture runs automatically for all tests in web_api/tests/.
    """
    for name in ("ICS_PRODID", "ICS_UID_DOMAIN", "ICS_LOCALE", "CALENDAR_FEED_MAX_AGE"):
        monkeypatch.delenv(name, raising=False)

    events = [
        Schedulable(
            id=1,
            name="Test Event",
            starts_at=datetime(2024, 3, 15, 14, 0, tzinfo=pytz.UTC),
            ends_at=datetime(2024, 3, 15, 16, 0, tzinfo=pytz.UTC),
            timezone="America/New_York",
            description="<p>Monthly community meetup</p>",
            url="https://example.com/events/1",
            updated_at=datetime(2024, 3, 1, 9, 0, tzinfo=pytz.UTC),
        ),
        Schedulable(
            id=2,
            name="Weekly Study Group",
            starts_at=datetime(2024, 3, 4, 1, 0, tzinfo=pytz.UTC),
            ends_at=datetime(2024, 3, 4, 2, 0, tzinfo=pytz.UTC),
            timezone="Asia/Tokyo",
            recurrence=Recurrence(rule=RecurrenceRule("weekly", weekdays=["MO"])),
            updated_at=datetime(2024, 3, 2, 9, 0, tzinfo=pytz.UTC),
        ),
    ]
    feed = CalendarFeed(
        id="community",
        name="Community Events",
        subscription_token=FEED_TOKEN,
        events=events,
    )

    registry = FeedRegistry()
    registry.add_feed(feed)
    # Claims to recur but has no schedule, so export fails
    registry.add_event(Schedulable(id=99, name="Broken Event", recurring=True))
    registry.add_feed(
        CalendarFeed(
            id="broken",
            name="Broken",
            subscription_token=FEED_TOKEN,
            events=[registry.get_event(99)],
        )
    )
    # Has a schedule that fails to render
    registry.add_feed(
        CalendarFeed(
            id="unrenderable",
            name="Unrenderable",
            subscription_token=FEED_TOKEN,
            events=[Schedulable(id=98, name="Garbled Event", schedule=BrokenSchedule())],
        )
    )
    set_registry(registry)

    yield registry

    clear_registry()
