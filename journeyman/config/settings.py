import logging
from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from journeyman.models.enums import StrategyKind

VALID_LOG_LEVELS = ["DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(Exception):
    """Raised when settings are invalid. Always fatal, always before any request."""

    pass


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Output
    output_path: str = Field(
        "nhl_players.json", description="Where the JSON database is written."
    )

    # Request pacing
    request_delay_ms: int = Field(
        100, ge=0, description="Delay between sequential requests in milliseconds."
    )
    request_timeout_seconds: float = Field(
        30.0, gt=0, description="Timeout for a single HTTP request."
    )
    max_request_attempts: int = Field(
        3, ge=1, description="Attempts per request for transient failures."
    )
    progress_interval: int = Field(
        20, ge=1, description="Log a progress line every N completed requests."
    )

    # Season range (inclusive start years)
    start_year: int = Field(2015, ge=1917, description="First season start year.")
    end_year: int = Field(2025, ge=1917, description="Last season start year.")

    # Aggregation
    strategy: StrategyKind = Field(
        StrategyKind.LEGACY, description="Which aggregation strategy to run."
    )
    include_games: bool = Field(
        False, description="Mine boxscores for players missing from rosters."
    )
    games_per_season_limit: int = Field(
        10, ge=0, description="Boxscores examined per team/season."
    )
    directory_limit: int = Field(
        25000, ge=1, description="Result limit for the player directory search."
    )

    # NHL API
    api_base_url: str = "https://api-web.nhle.com/v1"
    search_api_url: str = "https://search.d3.nhle.com/api/v1"
    legacy_api_url: str = "https://statsapi.web.nhl.com/api/v1"
    user_agent: str = "NHL Player Database Generator 1.0"

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in VALID_LOG_LEVELS:
            logging.warning(f"Invalid LOG_LEVEL '{value}'. Using INFO.")
            return "INFO"
        return level

    @field_validator("api_base_url", "search_api_url", "legacy_api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def _check_season_range(self) -> "AppSettings":
        if self.start_year > self.end_year:
            raise ValueError(
                f"start_year ({self.start_year}) must not be after end_year ({self.end_year})"
            )
        return self

    @property
    def request_delay_seconds(self) -> float:
        return self.request_delay_ms / 1000.0


def load_settings(**overrides: Any) -> AppSettings:
    """Loads and validates application settings.

    Keyword overrides take precedence over the environment and .env file.
    """
    try:
        return AppSettings(**overrides)
    except ValidationError as e:
        logging.error(f"Invalid application settings: {e}")
        raise ConfigurationError(str(e)) from e


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Cached settings for code paths that are not handed an explicit instance."""
    return load_settings()
