"""Application configuration settings.

This module defines the ``Settings`` class using ``pydantic-settings`` to
load configuration from environment variables (and an optional ``.env``
file). It centralises all runtime configuration for the application, such
as Google API credentials, the facility's operating hours and the fetch
timeout.

The operating window is validated when settings are loaded: an end hour
that does not come after the start hour is a configuration error, never
something the statistics code has to cope with.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, PrivateAttr, model_validator
from pydantic_settings import BaseSettings

DEFAULT_START_HOUR = 6
DEFAULT_END_HOUR = 18


class UtilizationConfig(BaseModel):
    """The facility's daily operating window and which statistics to show.

    Zero hours fall back to the defaults, and leaving both statistics
    flags off turns both on.
    """

    start_hour: int = DEFAULT_START_HOUR
    end_hour: int = DEFAULT_END_HOUR
    show_daily_stats: bool = True
    show_weekly_stats: bool = True

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("start_hour"):
            data["start_hour"] = DEFAULT_START_HOUR
        if not data.get("end_hour"):
            data["end_hour"] = DEFAULT_END_HOUR
        if not data.get("show_daily_stats") and not data.get("show_weekly_stats"):
            data["show_daily_stats"] = True
            data["show_weekly_stats"] = True
        return data

    @model_validator(mode="after")
    def _check_window(self) -> "UtilizationConfig":
        for name in ("start_hour", "end_hour"):
            value = getattr(self, name)
            if not 0 <= value <= 23:
                raise ValueError(f"{name} must be between 0 and 23, got {value}")
        if self.end_hour <= self.start_hour:
            raise ValueError(
                f"end_hour ({self.end_hour}) must be later than start_hour ({self.start_hour})"
            )
        return self

    @property
    def available_hours(self) -> int:
        """Operating hours per day, the denominator of daily utilization."""
        return self.end_hour - self.start_hour


class Settings(BaseSettings):
    """Configuration values loaded from environment variables.

    Environment variable names map to fields by alias. See the field
    definitions for documentation. Credentials are only needed when the
    calendar is actually queried, so every field has a default and the
    module can be imported without a configured environment.
    """

    # Calendar selection
    google_calendar_id: str = Field(
        default="primary",
        alias="GOOGLE_CALENDAR_ID",
        description="Calendar whose events count as facility bookings.",
    )

    # Google authentication. Each accepts inline JSON or a path to a JSON file.
    google_token_json: str = Field(
        default="",
        alias="GOOGLE_TOKEN_JSON",
        description="Authorized user token (token.json) from the installed-app OAuth flow.",
    )
    google_service_account_json: str = Field(default="", alias="GOOGLE_SERVICE_ACCOUNT_JSON")
    google_impersonate_user: str = Field(
        default="",
        alias="GOOGLE_IMPERSONATE_USER",
        description="Workspace user to impersonate with a service account. Empty disables delegation.",
    )

    # Operating window
    start_hour: int = Field(default=DEFAULT_START_HOUR, alias="UTILIZATION_START_HOUR")
    end_hour: int = Field(default=DEFAULT_END_HOUR, alias="UTILIZATION_END_HOUR")
    show_daily_stats: bool = Field(default=True, alias="SHOW_DAILY_STATS")
    show_weekly_stats: bool = Field(default=True, alias="SHOW_WEEKLY_STATS")

    # Fetch behaviour
    fetch_timeout_seconds: float = Field(
        default=10.0,
        alias="FETCH_TIMEOUT_SECONDS",
        description="Upper bound on a calendar fetch before the request fails as timed out.",
    )
    report_days: int = Field(
        default=30,
        alias="REPORT_DAYS",
        description="Length of the reporting window, counted forward from the chosen date.",
    )
    max_results: int = Field(default=100, alias="MAX_RESULTS")

    config_file: str = Field(
        default="",
        alias="CONFIG_FILE",
        description="Optional JSON file whose calendar id and utilization_config override the environment.",
    )

    port: int = Field(default=8080, alias="PORT")

    # Resolved once at load time from the fields above and CONFIG_FILE.
    _utilization: UtilizationConfig = PrivateAttr(default_factory=UtilizationConfig)
    _calendar_id: str = PrivateAttr(default="")

    class Config:
        extra = "ignore"
        populate_by_name = True
        env_file = ".env"

    @model_validator(mode="after")
    def _load_utilization(self) -> "Settings":
        # Read CONFIG_FILE once; later edits to it take effect on the next load.
        overrides = _read_config_file(self.config_file)
        window = overrides.get("utilization_config") or {}
        if not isinstance(window, dict):
            raise ValueError(f"utilization_config in {self.config_file} must be a JSON object")
        self._utilization = UtilizationConfig(
            start_hour=window.get("start_hour", self.start_hour),
            end_hour=window.get("end_hour", self.end_hour),
            show_daily_stats=window.get("show_daily_stats", self.show_daily_stats),
            show_weekly_stats=window.get("show_weekly_stats", self.show_weekly_stats),
        )
        self._calendar_id = overrides.get("google_calendar_id") or self.google_calendar_id
        return self

    @property
    def utilization(self) -> UtilizationConfig:
        """The operating window, with ``CONFIG_FILE`` taking precedence."""
        return self._utilization

    @property
    def calendar_id(self) -> str:
        return self._calendar_id


def _read_config_file(config_file: str) -> Dict[str, Any]:
    """Parse the optional JSON config file; a missing file means no overrides.

    Raises:
        ValueError: if the file is not valid JSON or does not hold an object.
    """
    if not config_file:
        return {}
    path = Path(config_file)
    if not path.is_file():
        return {}
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{config_file} must hold a JSON object, got {type(data).__name__}")
    return data


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """Build a fresh ``Settings``; ``env_file`` allows overriding in tests."""
    return Settings(_env_file=env_file)


# Instantiate settings at module import time. This allows other modules to
# import ``settings`` directly without repeatedly reading environment variables.
settings = load_settings()
