import logging
from typing import List, Optional

from pydantic import BaseModel, Field, HttpUrl, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STOP_WORDS: List[str] = [
    # Club / association abbreviations
    "fc", "cf", "sc", "ac", "as", "cd", "rcd", "ud", "sd", "afc", "fk", "sk",
    "club",
    # Reserve and youth markers
    "reserves", "reserve", "res", "youth",
    "u17", "u18", "u19", "u20", "u21", "u23",
    # Second / third squad suffixes
    "ii", "iii", "b", "c",
]


class MatchWeights(BaseModel):
    """Composite-score weights for the four matching signals."""

    time: float = Field(0.2, ge=0, le=1)
    league: float = Field(0.2, ge=0, le=1)
    home: float = Field(0.3, ge=0, le=1)
    away: float = Field(0.3, ge=0, le=1)

    @model_validator(mode="after")
    def check_total(self) -> "MatchWeights":
        total = self.time + self.league + self.home + self.away
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Match weights must sum to 1.0, got {total:.4f}")
        return self


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Supabase Configuration (alias store)
    supabase_url: Optional[HttpUrl] = Field(
        None, description="URL for the Supabase project holding the alias tables."
    )
    supabase_key: Optional[str] = Field(
        None, description="Key for the Supabase project."
    )

    # Matching Settings
    match_threshold: float = Field(
        0.55,
        ge=0,
        le=1,
        description="Minimum composite score for a Crown/API pair to be accepted.",
    )
    match_weights: MatchWeights = Field(default_factory=MatchWeights)
    ngram_size: int = Field(3, ge=1, description="Character n-gram length.")
    unparsed_time_score: float = Field(
        0.2,
        ge=0,
        le=1,
        description="Time score used when a Crown kickoff token cannot be parsed.",
    )
    time_window_minutes: int = Field(
        240, gt=0, description="Kickoff gap at which the time score reaches zero."
    )
    year_rollover_days: int = Field(
        182,
        gt=0,
        description="Gap from the reference instant beyond which a yearless kickoff shifts year.",
    )
    match_workers: int = Field(
        1, ge=1, description="Worker threads sharding the Crown fixture loop."
    )
    unmatched_sample_size: int = Field(50, ge=0)
    skip_special_fixtures: bool = True

    # Normalization Settings
    stop_words: List[str] = Field(default_factory=lambda: list(DEFAULT_STOP_WORDS))

    # Alias Cache Settings
    alias_cache_ttl_seconds: float = Field(60.0, ge=0)

    # Batch Files
    crown_input_path: str = "crown-gids.json"
    api_input_path: str = "api-fixtures.json"
    mapping_output_path: str = "crown-match-map.json"

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
