"""Google Calendar client utilities for the utilization service.

This module provides helpers to load credentials and list the events of
the booking calendar. Two kinds of credentials are supported: the
authorized user token (``token.json``) produced by the installed-app OAuth
flow, and a service account key with optional domain-wide delegation.
Both are provided via the ``Settings`` object in ``facility_utilization.config``
and may be given either inline or as a path.

Failures are translated into the exceptions in ``facility_utilization.errors``
so callers can tell bad credentials from an unreachable API. Requests are
not retried; a failed fetch fails the request.

The functions here are deliberately synchronous. ``service`` runs them on
a worker thread to bound their latency.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

import httplib2
from google.auth.exceptions import GoogleAuthError, RefreshError, TransportError
from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .config import Settings
from .errors import CredentialsError, SourceUnreachableError

logger = logging.getLogger(__name__)

# Read-only access to events is all the report needs. Do not add broader
# scopes unless absolutely required.
SCOPES: Tuple[str, ...] = ("https://www.googleapis.com/auth/calendar.readonly",)

_AUTH_STATUSES = (401, 403)


def _load_json_setting(name: str, raw: str) -> Dict[str, Any]:
    """Load a JSON credential setting given either inline or as a path.

    Raises:
        CredentialsError: if the value is empty, missing or not valid JSON.
    """
    raw = raw.strip()
    if not raw:
        raise CredentialsError(f"{name} is not configured")
    try:
        # Detect inline JSON by looking for a brace at the start.
        if raw.startswith("{"):
            return json.loads(raw)
        # Treat as a path relative to the host filesystem.
        with open(raw, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except OSError as exc:
        raise CredentialsError(f"unable to read {name} from {raw!r}: {exc}") from exc
    except ValueError as exc:
        raise CredentialsError(f"unable to parse {name}: {exc}") from exc


def get_credentials(settings: Settings):
    """Return credentials for the Calendar API.

    The user token wins when both kinds are configured. For a service
    account, ``GOOGLE_IMPERSONATE_USER`` enables delegation.
    """
    try:
        if settings.google_token_json.strip():
            info = _load_json_setting("GOOGLE_TOKEN_JSON", settings.google_token_json)
            logger.info("Using authorized user token for Calendar access")
            return user_credentials.Credentials.from_authorized_user_info(info, scopes=list(SCOPES))
        if settings.google_service_account_json.strip():
            info = _load_json_setting("GOOGLE_SERVICE_ACCOUNT_JSON", settings.google_service_account_json)
            creds = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
            if settings.google_impersonate_user:
                creds = creds.with_subject(settings.google_impersonate_user)
            logger.info("Using service account credentials for Calendar access")
            return creds
    except (GoogleAuthError, ValueError) as exc:
        raise CredentialsError(f"invalid Google credentials: {exc}") from exc
    raise CredentialsError(
        "no Google credentials configured; set GOOGLE_TOKEN_JSON or GOOGLE_SERVICE_ACCOUNT_JSON"
    )


def get_calendar_service(settings: Settings):
    """Build and return a Calendar service client."""
    creds = get_credentials(settings)
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


def _rfc3339(moment: datetime) -> str:
    """Return an RFC 3339 timestamp in UTC with a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def list_events(settings: Settings, time_min: datetime, time_max: datetime) -> List[Dict[str, Any]]:
    """Retrieve the events of the booking calendar within a time window.

    Args:
        settings: application settings holding credentials and calendar id.
        time_min: the start time (inclusive). Naive values are taken as local time.
        time_max: the end time (exclusive).

    Returns:
        The raw event resources, ordered by start time.

    Raises:
        CredentialsError: if credentials are missing or rejected.
        SourceUnreachableError: if the API cannot be reached or fails.
    """
    calendar_id = settings.calendar_id
    service = get_calendar_service(settings)
    logger.info("Fetching calendar events for %s from %s to %s", calendar_id, time_min, time_max)
    request = service.events().list(
        calendarId=calendar_id,
        showDeleted=False,
        singleEvents=True,
        orderBy="startTime",
        timeMin=_rfc3339(time_min),
        timeMax=_rfc3339(time_max),
        maxResults=settings.max_results,
    )
    try:
        response = request.execute()
    except HttpError as exc:
        status = getattr(exc.resp, "status", None)
        logger.error("Calendar events query failed (status=%s): %s", status, exc)
        if status in _AUTH_STATUSES:
            raise CredentialsError(f"Google rejected the credentials (status {status})") from exc
        raise SourceUnreachableError(f"unable to retrieve events: {exc}") from exc
    except RefreshError as exc:
        logger.error("Refreshing Google credentials failed: %s", exc)
        raise CredentialsError(f"unable to refresh Google credentials: {exc}") from exc
    except (TransportError, httplib2.HttpLib2Error, OSError) as exc:
        logger.error("Calendar API unreachable: %s", exc)
        raise SourceUnreachableError(f"unable to reach the Calendar API: {exc}") from exc
    items: List[Dict[str, Any]] = response.get("items", [])
    logger.info("Calendar events retrieved: %s", len(items))
    return items
