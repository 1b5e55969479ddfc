"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    db_path: str = "calorie_tracker.db"
    user_id: str = "local-user"
    search_limit: int = 50
    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    loss_pace_kg_per_week: float = 0.5
    gain_pace_kg_per_week: float = 0.25
    on_track_tolerance_weeks: float = 1.0
    trend_window: int = 7
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_fdc_api_key(raw: str | None) -> str | None:
    """Normalize the FDC API key; blank values disable the remote fallback."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "-"}:
        return None
    return cleaned
