# Package initializer for the facility utilization service.

"""
The `facility_utilization` package turns calendar bookings into facility
utilization statistics and serves them over HTTP.

Modules:

- ``config``: application settings loaded from environment variables.
- ``models``: Pydantic data models for bookings and statistics.
- ``bookings``: normalization of raw calendar events into bookings.
- ``stats``: operating-window clipping and daily/weekly aggregation.
- ``periods``: reporting window and date navigation helpers.
- ``errors``: exceptions raised when the calendar cannot be read.
- ``google_client``: helpers for interacting with the Google Calendar API.
- ``service``: fetches events with a timeout and builds the report.
- ``rendering``: HTML formatting of a utilization report.
- ``main``: the FastAPI application definition.

"""

__version__ = "0.1.0"
