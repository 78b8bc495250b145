from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, the shape downstream consumers read."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreBreakdown(CamelModel):
    time_score: float
    league_score: float
    home_score: float
    away_score: float


class CrownSummary(CamelModel):
    league: str
    home: str
    away: str
    kickoff_token: str = Field(..., alias="datetime")
    source_show_type: Optional[str] = None


class ApiSummary(CamelModel):
    league: str
    home: str
    away: str
    match_time: datetime


class MatchMapping(CamelModel):
    """Links one Crown fixture to one API fixture."""

    crown_id: str
    api_id: str
    similarity_score: float = Field(..., ge=0, le=1)
    time_difference_minutes: int = Field(..., ge=0)
    scores: ScoreBreakdown
    crown: CrownSummary
    api: ApiSummary


class UnmatchedFixture(CamelModel):
    crown_id: str
    league: str
    home: str
    away: str
    kickoff_token: str = Field(..., alias="datetime")
    best_score: Optional[float] = None


class MappingDocument(CamelModel):
    """The persisted output of one matching run."""

    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_generated_at: Optional[datetime] = None
    crown_count: int
    api_count: int
    matched_count: int
    unmatched_count: int
    matches: List[MatchMapping] = []
    unmatched: List[UnmatchedFixture] = []
