"""Utilization statistics computed from bookings.

Only the part of a booking that falls inside the facility's daily
operating window counts. A booking is attributed entirely to the day it
starts on, days are grouped into Monday-start weeks, and utilization is
booked hours over available hours as a percentage.

Overlapping bookings are clipped and summed independently, so
utilization can exceed 100% on a double-booked day. Outputs are built
from dictionaries and carry no ordering guarantee; sort by ``date`` or
``week_start`` before presenting them.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Sequence

from .config import UtilizationConfig
from .models import Booking, DayStats, Summary, WeekStats

DAYS_PER_WEEK = 7


def _at_hour(moment: datetime, hour: int) -> datetime:
    return moment.replace(hour=hour, minute=0, second=0, microsecond=0)


def hours_in_operating_window(booking: Booking, start_hour: int, end_hour: int) -> float:
    """Return the booked hours of ``booking`` inside ``[start_hour, end_hour)``.

    An all-day booking uses the whole operating day regardless of its end.
    Otherwise the start is pushed forward to ``start_hour`` and the end
    pulled back to ``end_hour``, each on its own calendar day. The caller is
    responsible for day bucketing; bookings spanning midnight are not
    split. The result is never negative.
    """
    if booking.is_all_day:
        return float(end_hour - start_hour)

    effective_start = max(booking.start, _at_hour(booking.start, start_hour))
    effective_end = min(booking.end, _at_hour(booking.end, end_hour))

    hours = (effective_end - effective_start).total_seconds() / 3600
    if hours < 0:
        return 0.0
    return hours


def week_start(moment: datetime) -> date:
    """Return the Monday on or before ``moment``'s date."""
    day = moment.date()
    return day - timedelta(days=day.weekday())


def daily_stats(bookings: Iterable[Booking], window: UtilizationConfig) -> List[DayStats]:
    """Group bookings by start date and compute per-day utilization."""
    by_day: Dict[date, List[Booking]] = defaultdict(list)
    for booking in bookings:
        by_day[booking.start.date()].append(booking)

    available = window.available_hours
    result: List[DayStats] = []
    for day, day_bookings in by_day.items():
        total_hours = sum(
            hours_in_operating_window(b, window.start_hour, window.end_hour) for b in day_bookings
        )
        result.append(
            DayStats(
                date=day,
                bookings=day_bookings,
                total_hours=total_hours,
                utilization=total_hours / available * 100,
            )
        )
    return result


def weekly_stats(bookings: Iterable[Booking], window: UtilizationConfig) -> List[WeekStats]:
    """Group bookings into Monday-start weeks and compute per-week utilization.

    The denominator always assumes seven operating days, however many days
    of the week actually had bookings.
    """
    by_week: Dict[date, List[Booking]] = defaultdict(list)
    for booking in bookings:
        by_week[week_start(booking.start)].append(booking)

    available = DAYS_PER_WEEK * window.available_hours
    result: List[WeekStats] = []
    for monday, week_bookings in by_week.items():
        days = daily_stats(week_bookings, window)
        total_hours = sum(day.total_hours for day in days)
        result.append(
            WeekStats(
                week_start=monday,
                week_end=monday + timedelta(days=DAYS_PER_WEEK - 1),
                total_hours=total_hours,
                utilization=total_hours / available * 100,
                days=days,
            )
        )
    return result


def summarize(bookings: Sequence[Booking], days: Sequence[DayStats]) -> Summary:
    """Total bookings, total clipped hours and mean daily utilization."""
    total_hours = sum(day.total_hours for day in days)
    avg_utilization = sum(day.utilization for day in days) / len(days) if days else 0.0
    return Summary(
        total_bookings=len(bookings),
        total_hours=total_hours,
        avg_utilization=avg_utilization,
    )
