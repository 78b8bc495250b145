from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

SPECIAL_HOME_NAME = "Home Team"
SPECIAL_AWAY_NAME = "Away Team"


def _coerce_id(value: Any) -> Any:
    # Upstream ids arrive as ints or strings depending on the endpoint
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value))
    return value


def _present(*names: Optional[str]) -> Tuple[str, ...]:
    seen = []
    for name in names:
        if name and name not in seen:
            seen.append(name)
    return tuple(seen)


class CrownFixture(BaseModel):
    """A fixture scraped from the Crown betting site.

    Kickoff arrives as a yearless ``MM-DD HH:MMa|p`` token and is resolved
    against the batch generation time by the matching layer.
    """

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, str_strip_whitespace=True
    )

    id: str = Field(..., validation_alias=AliasChoices("id", "crown_gid", "gid"))
    league: str = ""
    league_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("leagueId", "league_id", "lid")
    )
    home: str = ""
    away: str = ""
    kickoff_token: str = Field(
        "", validation_alias=AliasChoices("datetime", "kickoff_token")
    )
    source_show_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "sourceShowType", "source_show_type", "source_showtype"
        ),
    )

    @field_validator("id", "league_id", mode="before")
    @classmethod
    def coerce_ids(cls, value: Any) -> Any:
        return _coerce_id(value)

    @property
    def is_special(self) -> bool:
        """Special-market rows (outrights, specials) are not real fixtures."""
        placeholder_teams = (
            self.home == SPECIAL_HOME_NAME and self.away == SPECIAL_AWAY_NAME
        )
        return placeholder_teams or "special" in self.league.lower()


class ApiFixture(BaseModel):
    """A fixture from the odds-data API, with optional Chinese team names."""

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, str_strip_whitespace=True
    )

    match_id: str = Field(..., validation_alias=AliasChoices("matchId", "match_id"))
    league_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("leagueId", "league_id")
    )
    league_name: str = Field(
        "", validation_alias=AliasChoices("leagueName", "league_name")
    )
    home_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("homeId", "home_id")
    )
    home_name: str = Field("", validation_alias=AliasChoices("homeName", "home_name"))
    home_name_traditional: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("homeNameTraditional", "home_name_traditional"),
    )
    home_name_simplified: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("homeNameSimplified", "home_name_simplified"),
    )
    away_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("awayId", "away_id")
    )
    away_name: str = Field("", validation_alias=AliasChoices("awayName", "away_name"))
    away_name_traditional: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("awayNameTraditional", "away_name_traditional"),
    )
    away_name_simplified: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("awayNameSimplified", "away_name_simplified"),
    )
    kickoff_epoch_millis: int = Field(
        ..., validation_alias=AliasChoices("kickoffEpochMillis", "kickoff_epoch_millis")
    )
    status: Optional[int] = None

    @field_validator("match_id", "league_id", "home_id", "away_id", mode="before")
    @classmethod
    def coerce_ids(cls, value: Any) -> Any:
        return _coerce_id(value)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value: Any) -> Any:
        # Textual states such as "NS" count as not started
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            try:
                return int(float(value))
            except (ValueError, OverflowError):
                return 0
        return value

    @property
    def kickoff(self) -> datetime:
        return datetime.fromtimestamp(self.kickoff_epoch_millis / 1000, tz=timezone.utc)

    @property
    def home_names(self) -> Tuple[str, ...]:
        """Every non-empty spelling of the home team, English first."""
        return _present(
            self.home_name, self.home_name_simplified, self.home_name_traditional
        )

    @property
    def away_names(self) -> Tuple[str, ...]:
        return _present(
            self.away_name, self.away_name_simplified, self.away_name_traditional
        )
