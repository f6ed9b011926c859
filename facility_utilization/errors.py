"""Exceptions raised when bookings cannot be read from the calendar.

A failed fetch is fatal for the request that triggered it; callers show
the message rather than an empty set of statistics. The subclasses let the
web layer tell the user what to fix.
"""


class CalendarError(RuntimeError):
    """Base class for failures reading the booking calendar."""


class CredentialsError(CalendarError):
    """Credentials are missing, unreadable, or rejected by Google."""


class SourceUnreachableError(CalendarError):
    """The Calendar API could not be reached or returned an error."""


class FetchTimeoutError(CalendarError):
    """The calendar fetch did not finish within the configured timeout."""

    def __init__(self, timeout_seconds: float):
        super().__init__(f"calendar data retrieval timed out after {timeout_seconds:g} seconds")
        self.timeout_seconds = timeout_seconds
