"""Pydantic data models for bookings and utilization statistics.

These models define the structure of the statistics computed from a
calendar. They are separate from the Google API event resources to
decouple our internal representation from external dependencies. All of
them are frozen: statistics are derived fresh for every request and are
never mutated after construction.
"""

from datetime import date, datetime, timedelta
from typing import List

from pydantic import BaseModel

NO_TITLE = "(No title)"


class Booking(BaseModel):
    """A single calendar booking with its unclipped duration."""

    title: str = NO_TITLE
    start: datetime
    end: datetime
    duration: timedelta

    class Config:
        frozen = True

    @property
    def is_all_day(self) -> bool:
        """True when the booking starts exactly at midnight."""
        return self.start.hour == 0 and self.start.minute == 0


class DayStats(BaseModel):
    """Clipped booked hours and utilization for one calendar day."""

    date: date
    bookings: List[Booking] = []
    total_hours: float
    utilization: float

    class Config:
        frozen = True


class WeekStats(BaseModel):
    """Clipped booked hours and utilization for one Monday-start week."""

    week_start: date
    week_end: date
    total_hours: float
    utilization: float
    days: List[DayStats] = []

    class Config:
        frozen = True


class UtilizationReport(BaseModel):
    """Everything computed for one reporting window."""

    window_start: datetime
    window_end: datetime
    bookings: List[Booking] = []
    daily_stats: List[DayStats] = []
    weekly_stats: List[WeekStats] = []

    class Config:
        frozen = True


class Summary(BaseModel):
    """Headline numbers shown above the detailed tables."""

    total_bookings: int
    total_hours: float
    avg_utilization: float

    class Config:
        frozen = True
