"""HTML rendering of a utilization report.

The page is built here rather than from a separate template or static
file. This keeps deployment to a single Python package and avoids the
need for a frontend build chain. Booking titles come from the calendar
and are escaped before they reach the page.
"""

from __future__ import annotations

from datetime import date, datetime
from html import escape
from typing import List

from .config import UtilizationConfig
from .models import Booking, Summary, UtilizationReport

HIGH_UTILIZATION = 80.0
MEDIUM_UTILIZATION = 50.0


def format_time(moment: datetime) -> str:
    """Format a booking start, e.g. ``Mon Jan 2 15:04`` or ``Mon Jan 2 (all day)``."""
    if moment.hour == 0 and moment.minute == 0:
        return f"{moment:%a %b} {moment.day} (all day)"
    return f"{moment:%a %b} {moment.day} {moment:%H:%M}"


def format_date(day: date) -> str:
    return f"{day:%a %b} {day.day}"


def format_week(day: date) -> str:
    return f"{day:%b} {day.day}"


def round_float(value: float) -> str:
    return f"{value:.1f}"


def utilization_class(utilization: float) -> str:
    """CSS class used to colour a utilization figure."""
    if utilization >= HIGH_UTILIZATION:
        return "utilization-high"
    if utilization >= MEDIUM_UTILIZATION:
        return "utilization-medium"
    return "utilization-low"


CSS = """
    body {
      font-family: system-ui, -apple-system, Segoe UI, Roboto, Ubuntu, Cantarell, Noto Sans, Arial;
      max-width: 960px; margin: 0 auto; padding: 18px 22px 28px; color: #1d2433;
    }
    header { display: flex; gap: 16px; align-items: baseline; flex-wrap: wrap; }
    h1 { margin: 0; font-size: 24px; font-weight: 650; }
    .meta { opacity: 0.8; font-size: 14px; }
    nav { margin-left: auto; display: flex; gap: 10px; }
    .cards { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 14px; margin: 18px 0; }
    .card { border-radius: 16px; padding: 16px; border: 1px solid #dde3ee; background: #f7f9fc; }
    .card .value { font-size: 28px; font-weight: 700; }
    table { width: 100%; border-collapse: collapse; margin-bottom: 22px; }
    th, td { text-align: left; padding: 8px 10px; border-bottom: 1px solid #e6eaf2; font-size: 14px; }
    .utilization-high { color: #b3261e; font-weight: 650; }
    .utilization-medium { color: #9a6700; font-weight: 650; }
    .utilization-low { color: #1a7f37; }
    footer { opacity: 0.6; font-size: 12px; }
"""


def _utilization_cell(utilization: float) -> str:
    return f'<td class="{utilization_class(utilization)}">{round_float(utilization)}%</td>'


def _summary_cards(summary: Summary) -> str:
    return f"""
  <section class="cards">
    <div class="card"><div>Bookings</div><div class="value">{summary.total_bookings}</div></div>
    <div class="card"><div>Booked hours</div><div class="value">{round_float(summary.total_hours)}</div></div>
    <div class="card"><div>Average utilization</div>
      <div class="value {utilization_class(summary.avg_utilization)}">{round_float(summary.avg_utilization)}%</div></div>
  </section>"""


def _weekly_table(report: UtilizationReport) -> str:
    if not report.weekly_stats:
        return ""
    rows: List[str] = []
    for week in sorted(report.weekly_stats, key=lambda w: w.week_start):
        rows.append(
            f"<tr><td>{format_week(week.week_start)} – {format_week(week.week_end)}</td>"
            f"<td>{len(week.days)}</td><td>{round_float(week.total_hours)}</td>"
            f"{_utilization_cell(week.utilization)}</tr>"
        )
    return (
        "<h2>Weekly utilization</h2><table><tr><th>Week</th><th>Active days</th>"
        "<th>Hours</th><th>Utilization</th></tr>" + "".join(rows) + "</table>"
    )


def _daily_table(report: UtilizationReport) -> str:
    if not report.daily_stats:
        return ""
    rows: List[str] = []
    for day in sorted(report.daily_stats, key=lambda d: d.date):
        rows.append(
            f"<tr><td>{format_date(day.date)}</td><td>{len(day.bookings)}</td>"
            f"<td>{round_float(day.total_hours)}</td>{_utilization_cell(day.utilization)}</tr>"
        )
    return (
        "<h2>Daily utilization</h2><table><tr><th>Day</th><th>Bookings</th>"
        "<th>Hours</th><th>Utilization</th></tr>" + "".join(rows) + "</table>"
    )


def _booking_rows(bookings: List[Booking]) -> str:
    if not bookings:
        return "<p>No bookings in this period.</p>"
    rows = [
        f"<tr><td>{format_time(b.start)}</td><td>{escape(b.title)}</td>"
        f"<td>{round_float(b.duration.total_seconds() / 3600)}</td></tr>"
        for b in bookings
    ]
    return "<table><tr><th>Start</th><th>Title</th><th>Hours</th></tr>" + "".join(rows) + "</table>"


def render_page(
    report: UtilizationReport,
    summary: Summary,
    config: UtilizationConfig,
    *,
    calendar_id: str,
    chosen_date: datetime,
    previous: datetime,
    following: datetime,
    generated_at: datetime,
    version: str = "",
) -> str:
    """Render the full utilization page."""
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Facility Utilization</title>
  <style>{CSS}</style>
</head>
<body>
  <header>
    <h1>Facility Utilization</h1>
    <div class="meta">{format_date(chosen_date)} + {(report.window_end - report.window_start).days} days
      · open {config.start_hour:02d}:00–{config.end_hour:02d}:00 · {escape(calendar_id)}</div>
    <nav>
      <a href="/?date={previous:%Y-%m-%d}">&larr; Previous week</a>
      <a href="/?date={following:%Y-%m-%d}">Next week &rarr;</a>
    </nav>
  </header>
  {_summary_cards(summary)}
  {_weekly_table(report)}
  {_daily_table(report)}
  <h2>Bookings</h2>
  {_booking_rows(report.bookings)}
  <footer>Generated at {generated_at:%Y-%m-%d %H:%M:%S} {escape(version)}</footer>
</body>
</html>
"""


def render_error_page(error: Exception, generated_at: datetime) -> str:
    """Render a friendly page explaining why the calendar could not be read."""
    return f"""<!doctype html>
<html lang="en">
<head><meta charset="utf-8" /><title>Calendar Error</title><style>{CSS}</style></head>
<body>
  <h1>Facility Utilization</h1>
  <div style="background: #f8d7da; border: 1px solid #f5c6cb; padding: 15px; border-radius: 12px; color: #721c24;">
    <h3>Unable to load calendar data</h3>
    <p><strong>Error:</strong> {escape(str(error))}</p>
    <p>This could be due to:</p>
    <ul>
      <li>Missing or invalid Google credentials</li>
      <li>Network connectivity issues</li>
      <li>Google Calendar API rate limits</li>
    </ul>
    <p>Please check the server logs for more details.</p>
  </div>
  <footer>Generated at {generated_at:%Y-%m-%d %H:%M:%S}</footer>
</body>
</html>
"""  # noqa: E501
