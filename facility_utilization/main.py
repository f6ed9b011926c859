"""Main application entry point for the facility utilization service.

This module defines the FastAPI application, configures logging and
serves both a JSON API and an HTML page built from the booking calendar.

Endpoints:
  - ``/``: serve the utilization page for ``?date=YYYY-MM-DD`` (default today).
  - ``/api/utilization``: return the same report as JSON.
  - ``/healthz``: simple health check endpoint.

Statistics are computed fresh for every request. A failed calendar fetch
is never turned into empty statistics: the page shows what went wrong and
the API answers with an error status.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse

from . import __version__
from .config import settings
from .errors import CalendarError, CredentialsError, FetchTimeoutError
from .periods import navigation, parse_reference_date
from .rendering import render_error_page, render_page
from .service import get_calendar_data
from .stats import summarize

logger = logging.getLogger("facility_utilization")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

app = FastAPI(title="Facility Utilization Service", version=__version__)


def _utcnow() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


def _error_status(exc: CalendarError) -> int:
    if isinstance(exc, FetchTimeoutError):
        return 504
    if isinstance(exc, CredentialsError):
        return 401
    return 502


@app.get("/api/utilization")
def api_utilization(date: Optional[str] = None) -> Dict[str, Any]:
    """Return bookings, daily and weekly statistics and the summary as JSON."""
    chosen = parse_reference_date(date)
    try:
        report = get_calendar_data(settings, chosen)
    except CalendarError as exc:
        logger.error("Failed to get calendar data: %s", exc)
        raise HTTPException(status_code=_error_status(exc), detail=str(exc))
    summary = summarize(report.bookings, report.daily_stats)
    return {
        "generatedAt": _utcnow().isoformat().replace("+00:00", "Z"),
        "calendarId": settings.calendar_id,
        "config": settings.utilization.model_dump(),
        "summary": summary.model_dump(),
        "report": report.model_dump(mode="json"),
    }


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    """Health check endpoint for monitoring."""
    return {"ok": True, "time": _utcnow().isoformat().replace("+00:00", "Z")}


@app.get("/", response_class=HTMLResponse)
def utilization_page(date: Optional[str] = None) -> HTMLResponse:
    """Serve the utilization page.

    Calendar failures render an explanatory page with status 200 so the
    message reaches people looking at a browser rather than a bare 500.
    """
    chosen = parse_reference_date(date)
    try:
        report = get_calendar_data(settings, chosen)
    except CalendarError as exc:
        logger.error("Failed to get calendar data: %s", exc)
        return HTMLResponse(content=render_error_page(exc, datetime.now()))

    previous, following = navigation(chosen)
    html = render_page(
        report,
        summarize(report.bookings, report.daily_stats),
        settings.utilization,
        calendar_id=settings.calendar_id,
        chosen_date=chosen,
        previous=previous,
        following=following,
        generated_at=datetime.now(),
        version=__version__,
    )
    return HTMLResponse(content=html)
