from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from facility_utilization.config import UtilizationConfig, load_settings

ENV_VARS = (
    "GOOGLE_CALENDAR_ID",
    "UTILIZATION_START_HOUR",
    "UTILIZATION_END_HOUR",
    "SHOW_DAILY_STATS",
    "SHOW_WEEKLY_STATS",
    "FETCH_TIMEOUT_SECONDS",
    "REPORT_DAYS",
    "CONFIG_FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings(env_file=None)

    assert settings.calendar_id == "primary"
    assert settings.fetch_timeout_seconds == 10
    assert settings.report_days == 30
    assert settings.max_results == 100
    assert settings.utilization == UtilizationConfig(
        start_hour=6, end_hour=18, show_daily_stats=True, show_weekly_stats=True
    )
    assert settings.utilization.available_hours == 12


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_CALENDAR_ID", "courts@example.com")
    monkeypatch.setenv("UTILIZATION_START_HOUR", "8")
    monkeypatch.setenv("UTILIZATION_END_HOUR", "22")
    monkeypatch.setenv("SHOW_WEEKLY_STATS", "false")
    monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "2.5")

    settings = load_settings(env_file=None)

    assert settings.calendar_id == "courts@example.com"
    assert settings.fetch_timeout_seconds == 2.5
    assert settings.utilization.start_hour == 8
    assert settings.utilization.end_hour == 22
    assert settings.utilization.show_daily_stats is True
    assert settings.utilization.show_weekly_stats is False


def test_zero_hours_fall_back_to_defaults() -> None:
    config = UtilizationConfig(start_hour=0, end_hour=0)
    assert (config.start_hour, config.end_hour) == (6, 18)


def test_both_flags_off_turns_both_on() -> None:
    config = UtilizationConfig(show_daily_stats=False, show_weekly_stats=False)
    assert config.show_daily_stats and config.show_weekly_stats


def test_single_flag_off_is_respected() -> None:
    config = UtilizationConfig(show_daily_stats=False, show_weekly_stats=True)
    assert config.show_daily_stats is False
    assert config.show_weekly_stats is True


@pytest.mark.parametrize(
    "start_hour, end_hour",
    [(18, 6), (10, 10), (6, 24), (-1, 18)],
)
def test_invalid_window_is_rejected(start_hour: int, end_hour: int) -> None:
    with pytest.raises(ValidationError):
        UtilizationConfig(start_hour=start_hour, end_hour=end_hour)


def test_invalid_window_fails_when_settings_load(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UTILIZATION_START_HOUR", "20")
    monkeypatch.setenv("UTILIZATION_END_HOUR", "8")

    with pytest.raises(ValidationError, match="end_hour"):
        load_settings(env_file=None)


def test_config_file_overrides_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps(
            {
                "google_calendar_id": "club@example.com",
                "utilization_config": {"start_hour": 7, "end_hour": 21, "show_daily_stats": True},
            }
        )
    )
    monkeypatch.setenv("UTILIZATION_START_HOUR", "9")
    monkeypatch.setenv("CONFIG_FILE", str(config_file))

    settings = load_settings(env_file=None)

    assert settings.calendar_id == "club@example.com"
    assert settings.utilization.start_hour == 7
    assert settings.utilization.end_hour == 21


def test_missing_config_file_is_ignored(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("CONFIG_FILE", str(tmp_path / "absent.json"))
    settings = load_settings(env_file=None)
    assert settings.utilization.start_hour == 6


def test_config_file_is_read_once_at_load(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"google_calendar_id": "club@example.com"}))
    monkeypatch.setenv("CONFIG_FILE", str(config_file))

    settings = load_settings(env_file=None)
    first = settings.utilization

    config_file.write_text(
        json.dumps({"google_calendar_id": "other@example.com", "utilization_config": {"start_hour": 8, "end_hour": 20}})
    )
    assert settings.utilization == first
    assert (settings.utilization.start_hour, settings.utilization.end_hour) == (6, 18)
    assert settings.calendar_id == "club@example.com"

    config_file.write_text("{ not json")
    assert settings.utilization == first


@pytest.mark.parametrize(
    "content",
    [
        "[]",
        '"club@example.com"',
        '{"utilization_config": [6, 18]}',
        "{ not json",
    ],
)
def test_malformed_config_file_fails_when_settings_load(
    monkeypatch: pytest.MonkeyPatch, tmp_path, content: str
) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(content)
    monkeypatch.setenv("CONFIG_FILE", str(config_file))

    with pytest.raises(ValidationError):
        load_settings(env_file=None)


def test_dotenv_file_is_read(tmp_path) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text("UTILIZATION_START_HOUR=7\nGOOGLE_CALENDAR_ID=dotenv@example.com\n")

    settings = load_settings(env_file=str(dotenv))

    assert settings.utilization.start_hour == 7
    assert settings.calendar_id == "dotenv@example.com"
