"""Reporting window and date navigation helpers."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Tuple

DEFAULT_REPORT_DAYS = 30
NAVIGATION_STEP = timedelta(days=7)


def reporting_window(
    reference: Optional[datetime] = None, days: int = DEFAULT_REPORT_DAYS
) -> Tuple[datetime, datetime]:
    """Return the ``[reference, reference + days)`` window bookings are fetched for."""
    if reference is None:
        reference = datetime.now().astimezone()
    return reference, reference + timedelta(days=days)


def parse_reference_date(value: Optional[str], now: Optional[datetime] = None) -> datetime:
    """Parse a ``YYYY-MM-DD`` query value, falling back to ``now`` when absent or invalid."""
    if now is None:
        now = datetime.now().astimezone()
    if not value:
        return now
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return now
    return parsed.replace(tzinfo=now.tzinfo)


def navigation(reference: datetime) -> Tuple[datetime, datetime]:
    """Return the previous and next reference dates, one week either side."""
    return reference - NAVIGATION_STEP, reference + NAVIGATION_STEP
