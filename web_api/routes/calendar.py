"""
Calendar export API routes.

Endpoints:
- GET /api/events/{event_id}.ics - Download a single event
- GET /api/calendars/{calendar_id}/feed.ics?token= - Subscription feed (ICS)
- GET /api/calendars/{calendar_id}/feed.json?token= - Subscription feed (Google Calendar JSON)
"""

import asyncio
import logging
from collections.abc import Callable

import sentry_sdk
from fastapi import APIRouter, Header, HTTPException, Response

from better_together.calendar_export import GoogleCalendarJson
from better_together.config import get_feed_max_age
from better_together.constants import ICS_CONTENT_TYPE
from better_together.feeds import CalendarFeed, get_registry, http_date, not_modified
from better_together.ics import IcsExportError, to_ics

router = APIRouter(prefix="/api", tags=["calendar"])

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


async def _render(render: Callable[[], str], what: str) -> str:
    """
    Run an exporter off the event loop.

    Export failures become a 500 with no partial body.
    """
    try:
        return await asyncio.to_thread(render)
    except IcsExportError as e:
        logger.exception(f"Failed to export {what}")
        sentry_sdk.capture_exception(e)
        raise HTTPException(status_code=500, detail="Calendar export failed")


def _authorized_feed(calendar_id: str, token: str | None) -> CalendarFeed:
    feed = get_registry().get_feed(calendar_id)
    if feed is None:
        raise HTTPException(status_code=404, detail="Calendar not found")
    if not feed.token_matches(token):
        logger.info(f"Rejected feed request for calendar {calendar_id}: bad token")
        raise HTTPException(status_code=403, detail="Invalid subscription token")
    return feed


async def _feed_response(
    feed: CalendarFeed,
    variant: str,
    render: Callable[[], str],
    media_type: str,
    if_none_match: str | None,
    if_modified_since: str | None,
) -> Response:
    etag = feed.etag(variant)
    last_modified = feed.last_modified

    headers = {
        "Cache-Control": f"private, max-age={get_feed_max_age()}",
        "ETag": etag,
    }
    if last_modified is not None:
        headers["Last-Modified"] = http_date(last_modified)

    if not_modified(etag, last_modified, if_none_match, if_modified_since):
        return Response(status_code=304, headers=headers)

    body = await _render(render, f"calendar {feed.id} ({variant})")
    return Response(content=body, media_type=media_type, headers=headers)


@router.get("/events/{event_id}.ics")
async def event_ics(event_id: str):
    """Download one event as an .ics attachment."""
    event = get_registry().get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    body = await _render(lambda: to_ics(event), f"event {event_id}")
    return Response(
        content=body,
        media_type=ICS_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="event-{event.id}.ics"'},
    )


@router.get("/calendars/{calendar_id}/feed.ics")
async def calendar_feed_ics(
    calendar_id: str,
    token: str | None = None,
    if_none_match: str | None = Header(None),
    if_modified_since: str | None = Header(None),
):
    """
    Subscription feed for calendar clients.

    Clients poll this URL; ETag and Last-Modified let them skip unchanged feeds.
    """
    feed = _authorized_feed(calendar_id, token)
    return await _feed_response(
        feed,
        "ics",
        lambda: to_ics(feed.events),
        ICS_CONTENT_TYPE,
        if_none_match,
        if_modified_since,
    )


@router.get("/calendars/{calendar_id}/feed.json")
async def calendar_feed_json(
    calendar_id: str,
    token: str | None = None,
    if_none_match: str | None = Header(None),
    if_modified_since: str | None = Header(None),
):
    """Same feed in Google Calendar events-list JSON."""
    feed = _authorized_feed(calendar_id, token)
    return await _feed_response(
        feed,
        "json",
        lambda: GoogleCalendarJson(feed.events).generate(),
        JSON_CONTENT_TYPE,
        if_none_match,
        if_modified_since,
    )
