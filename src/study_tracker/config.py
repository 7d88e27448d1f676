"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from study_tracker.domain.sessions import Period
from study_tracker.services.timer import DEFAULT_WINDOWS, TimeWindow

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_HOURS_PER_DAY = 24


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: str = "supabase"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    data_dir: str = ".data"
    identity_userinfo_url: str = "https://openidconnect.googleapis.com/v1/userinfo"
    timezone: str = "Asia/Taipei"
    morning_window: str = "8-12"
    afternoon_window: str = "13-19"
    tick_interval_seconds: float = 1.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def period_windows(self) -> dict[Period, TimeWindow]:
        """Return the configured window for each period."""
        return {
            Period.MORNING: parse_hour_window(
                self.morning_window, DEFAULT_WINDOWS[Period.MORNING]
            ),
            Period.AFTERNOON: parse_hour_window(
                self.afternoon_window, DEFAULT_WINDOWS[Period.AFTERNOON]
            ),
        }


def parse_hour_window(raw: str | None, default: TimeWindow) -> TimeWindow:
    """Parse a "start-end" hour range such as "8-12"."""
    if raw is None:
        return default
    cleaned = raw.strip()
    if not cleaned:
        return default
    start, sep, end = cleaned.partition("-")
    if not sep or not start.strip().isdigit() or not end.strip().isdigit():
        raise ValueError(f"Invalid hour window: {raw!r}")
    window = TimeWindow(int(start), int(end))
    if not 0 <= window.start_hour < window.end_hour <= _HOURS_PER_DAY:
        raise ValueError(f"Invalid hour window: {raw!r}")
    return window
