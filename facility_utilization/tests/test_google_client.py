from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import httplib2
import pytest
from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from facility_utilization.config import Settings
from facility_utilization.errors import CredentialsError, SourceUnreachableError
from facility_utilization.google_client import get_credentials, list_events


def _settings(**overrides) -> Settings:
    # Explicit values so the surrounding environment cannot leak in.
    values = {
        "GOOGLE_CALENDAR_ID": "courts@example.com",
        "GOOGLE_TOKEN_JSON": "",
        "GOOGLE_SERVICE_ACCOUNT_JSON": "",
        "CONFIG_FILE": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _service(response=None, error=None) -> MagicMock:
    service = MagicMock()
    execute = service.events.return_value.list.return_value.execute
    if error is not None:
        execute.side_effect = error
    else:
        execute.return_value = response
    return service


def _http_error(status: int) -> HttpError:
    return HttpError(httplib2.Response({"status": status}), b"{}")


WINDOW_START = datetime(2026, 10, 19, 9, 0, tzinfo=timezone(timedelta(hours=1)))
WINDOW_END = WINDOW_START + timedelta(days=30)


def test_missing_credentials_raise_credentials_error() -> None:
    with pytest.raises(CredentialsError, match="no Google credentials configured"):
        get_credentials(_settings())


def test_unparsable_inline_token_raises_credentials_error() -> None:
    with pytest.raises(CredentialsError, match="unable to parse GOOGLE_TOKEN_JSON"):
        get_credentials(_settings(GOOGLE_TOKEN_JSON="{not json"))


def test_missing_token_file_raises_credentials_error(tmp_path) -> None:
    with pytest.raises(CredentialsError, match="unable to read GOOGLE_TOKEN_JSON"):
        get_credentials(_settings(GOOGLE_TOKEN_JSON=str(tmp_path / "token.json")))


def test_incomplete_token_raises_credentials_error() -> None:
    with pytest.raises(CredentialsError, match="invalid Google credentials"):
        get_credentials(_settings(GOOGLE_TOKEN_JSON='{"client_id": "only"}'))


def test_authorized_user_token_is_loaded_from_file(tmp_path) -> None:
    token = tmp_path / "token.json"
    token.write_text(
        '{"client_id": "id", "client_secret": "secret", "refresh_token": "refresh", "token": "access"}'
    )

    creds = get_credentials(_settings(GOOGLE_TOKEN_JSON=str(token)))

    assert creds.refresh_token == "refresh"
    assert creds.token == "access"


def test_list_events_queries_calendar_window() -> None:
    items = [{"summary": "Court 1"}]
    service = _service(response={"items": items})

    with patch("facility_utilization.google_client.get_calendar_service", return_value=service):
        result = list_events(_settings(), WINDOW_START, WINDOW_END)

    assert result == items
    kwargs = service.events.return_value.list.call_args.kwargs
    assert kwargs["calendarId"] == "courts@example.com"
    assert kwargs["showDeleted"] is False
    assert kwargs["singleEvents"] is True
    assert kwargs["orderBy"] == "startTime"
    assert kwargs["maxResults"] == 100
    assert kwargs["timeMin"] == "2026-10-19T08:00:00Z"
    assert kwargs["timeMax"] == "2026-11-18T08:00:00Z"


def test_list_events_without_items_returns_empty_list() -> None:
    with patch("facility_utilization.google_client.get_calendar_service", return_value=_service(response={})):
        assert list_events(_settings(), WINDOW_START, WINDOW_END) == []


@pytest.mark.parametrize("status", [401, 403])
def test_auth_http_errors_map_to_credentials_error(status: int) -> None:
    service = _service(error=_http_error(status))

    with patch("facility_utilization.google_client.get_calendar_service", return_value=service):
        with pytest.raises(CredentialsError):
            list_events(_settings(), WINDOW_START, WINDOW_END)


def test_server_http_error_maps_to_unreachable() -> None:
    service = _service(error=_http_error(500))

    with patch("facility_utilization.google_client.get_calendar_service", return_value=service):
        with pytest.raises(SourceUnreachableError):
            list_events(_settings(), WINDOW_START, WINDOW_END)


def test_request_is_not_retried() -> None:
    service = _service(error=_http_error(503))

    with patch("facility_utilization.google_client.get_calendar_service", return_value=service):
        with pytest.raises(SourceUnreachableError):
            list_events(_settings(), WINDOW_START, WINDOW_END)

    assert service.events.return_value.list.return_value.execute.call_count == 1


def test_network_error_maps_to_unreachable() -> None:
    service = _service(error=ConnectionRefusedError("refused"))

    with patch("facility_utilization.google_client.get_calendar_service", return_value=service):
        with pytest.raises(SourceUnreachableError, match="unable to reach"):
            list_events(_settings(), WINDOW_START, WINDOW_END)


def test_refresh_error_maps_to_credentials_error() -> None:
    service = _service(error=RefreshError("invalid_grant"))

    with patch("facility_utilization.google_client.get_calendar_service", return_value=service):
        with pytest.raises(CredentialsError, match="refresh"):
            list_events(_settings(), WINDOW_START, WINDOW_END)
