"""Normalization of Google Calendar events into bookings.

Events come straight from the Calendar API ``events.list`` response. Each
one carries ``start``/``end`` objects holding either a ``dateTime``
(RFC 3339 timestamp) or a ``date`` (all-day event). Records that cannot be
turned into a booking are dropped: one bad event should not cost the
whole report.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .models import NO_TITLE, Booking

logger = logging.getLogger(__name__)


def parse_event_time(value: Dict[str, Any]) -> datetime:
    """Parse an event ``start``/``end`` object.

    Timestamps keep the offset Google sends, so the hour of day stays local
    to the calendar. Date-only values become midnight local time, so they
    can be compared with timestamps.

    Raises:
        ValueError: if neither field is present or the value is malformed.
    """
    date_time = value.get("dateTime")
    if date_time:
        if date_time.endswith("Z"):
            date_time = date_time[:-1] + "+00:00"
        return datetime.fromisoformat(date_time)
    day = value.get("date")
    if not day:
        raise ValueError("event time has neither dateTime nor date")
    return datetime.strptime(day, "%Y-%m-%d").astimezone()


def parse_booking(event: Dict[str, Any]) -> Optional[Booking]:
    """Return the booking for one event, or ``None`` if it is malformed."""
    start_raw = event.get("start")
    end_raw = event.get("end")
    if not start_raw or not end_raw:
        return None
    try:
        start = parse_event_time(start_raw)
        end = parse_event_time(end_raw)
        # Fails for a timestamp without an offset next to an offset-aware value.
        duration = end - start
    except (AttributeError, TypeError, ValueError) as exc:
        logger.debug("Skipping malformed event %s: %s", event.get("id", "?"), exc)
        return None
    return Booking(
        title=event.get("summary") or NO_TITLE,
        start=start,
        end=end,
        duration=duration,
    )


def parse_bookings(events: Iterable[Dict[str, Any]]) -> List[Booking]:
    """Convert raw events into bookings, preserving input order."""
    bookings: List[Booking] = []
    for event in events:
        booking = parse_booking(event)
        if booking is None:
            continue
        bookings.append(booking)
    return bookings
