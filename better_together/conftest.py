"""Pytest fixtures shared by the calendar export tests."""

from datetime import datetime
from unittest.mock import patch

import pytest
import pytz

from better_together.types import Schedulable


@pytest.fixture(autouse=True)
def clean_export_env(monkeypatch):
    """Ignore any ICS_* overrides from a developer's .env file."""
    for name in ("ICS_PRODID", "ICS_UID_DOMAIN", "ICS_LOCALE", "DEV_MODE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def frozen_now():
    """Freeze the clock used for DTSTAMP at 2024-03-01 12:00 UTC."""
    moment = datetime(2024, 3, 1, 12, 0, tzinfo=pytz.UTC)
    with patch("better_together.ics.formatter.now", return_value=moment):
        yield moment


@pytest.fixture
def make_event():
    """Factory for the "Test Event" used across scenarios (14:00-16:00 UTC)."""

    def _make(**overrides) -> Schedulable:
        fields = {
            "id": 1,
            "name": "Test Event",
            "starts_at": datetime(2024, 3, 15, 14, 0, tzinfo=pytz.UTC),
            "ends_at": datetime(2024, 3, 15, 16, 0, tzinfo=pytz.UTC),
            "timezone": "America/New_York",
        }
        fields.update(overrides)
        return Schedulable(**fields)

    return _make
