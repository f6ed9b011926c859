"""Builds a utilization report for a chosen date.

The calendar fetch runs on a worker thread so the request waits at most
``fetch_timeout_seconds`` for it. On expiry the caller gets a
``FetchTimeoutError``; the worker finishes in the shared pool and its
result is discarded, so it never contributes a partial result. Everything
after the fetch is pure computation.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .bookings import parse_bookings
from .config import Settings
from .errors import FetchTimeoutError
from .google_client import list_events
from .models import UtilizationReport
from .periods import reporting_window
from .stats import daily_stats, weekly_stats

logger = logging.getLogger(__name__)

EventFetcher = Callable[[Settings, datetime, datetime], List[Dict[str, Any]]]


# Shared by all requests so fetches that overrun their deadline cannot pile
# up threads. The Google HTTP client's own socket timeout frees a stuck worker.
FETCH_WORKERS = 4
_executor = ThreadPoolExecutor(max_workers=FETCH_WORKERS, thread_name_prefix="calendar-fetch")


def fetch_with_timeout(
    fetch: EventFetcher,
    settings: Settings,
    time_min: datetime,
    time_max: datetime,
) -> List[Dict[str, Any]]:
    """Run ``fetch`` bounded by ``settings.fetch_timeout_seconds``.

    Errors raised by ``fetch`` propagate unchanged.

    Raises:
        FetchTimeoutError: if the fetch does not finish in time.
    """
    future = _executor.submit(fetch, settings, time_min, time_max)
    try:
        return future.result(timeout=settings.fetch_timeout_seconds)
    except FutureTimeoutError:
        # Drops the fetch if it is still queued behind busy workers.
        future.cancel()
        logger.error("Calendar fetch timed out after %ss", settings.fetch_timeout_seconds)
        raise FetchTimeoutError(settings.fetch_timeout_seconds) from None


def get_calendar_data(
    settings: Settings,
    chosen_date: Optional[datetime] = None,
    fetch: Optional[EventFetcher] = None,
) -> UtilizationReport:
    """Fetch the reporting window's events and compute their statistics.

    Daily and weekly statistics are only computed when enabled in the
    utilization config; otherwise they are empty.
    """
    fetch = fetch or list_events
    window = settings.utilization
    start, end = reporting_window(chosen_date, settings.report_days)
    logger.info("Starting calendar data retrieval for %s from %s", settings.calendar_id, start)

    events = fetch_with_timeout(fetch, settings, start, end)
    bookings = parse_bookings(events)
    logger.info("Bookings parsed: %s of %s events", len(bookings), len(events))

    days = []
    weeks = []
    if window.show_daily_stats:
        days = daily_stats(bookings, window)
        logger.info("Daily stats calculated: %s", len(days))
    if window.show_weekly_stats:
        weeks = weekly_stats(bookings, window)
        logger.info("Weekly stats calculated: %s", len(weeks))

    return UtilizationReport(
        window_start=start,
        window_end=end,
        bookings=bookings,
        daily_stats=days,
        weekly_stats=weeks,
    )
