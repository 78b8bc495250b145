from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Sequence

from loguru import logger

from fixturelink.aliases.index import AliasIndex
from fixturelink.config.settings import MatchWeights, settings
from fixturelink.matching.kickoff import minutes_between, parse_crown_kickoff
from fixturelink.models.enums import EntityType
from fixturelink.models.fixture import ApiFixture, CrownFixture
from fixturelink.models.mapping import (
    ApiSummary,
    CrownSummary,
    MappingDocument,
    MatchMapping,
    ScoreBreakdown,
    UnmatchedFixture,
)
from fixturelink.normalization.similarity import SimilarityEngine, default_engine

if TYPE_CHECKING:
    from fixturelink.aliases.resolver import AliasResolver

# Recorded time gap when the Crown kickoff could not be parsed
UNPARSED_TIME_DIFF_MINUTES = 720


class PairScore(NamedTuple):
    api: ApiFixture
    composite: float
    time_diff_minutes: int
    time_score: float
    league_score: float
    home_score: float
    away_score: float


class CrownEvaluation(NamedTuple):
    crown: CrownFixture
    best: Optional[PairScore]
    matched: bool


class MatchRun(NamedTuple):
    matches: List[MatchMapping]
    unmatched: List[CrownEvaluation]
    crown_count: int
    api_count: int


class MatchOrchestrator:
    """Links Crown fixtures to API fixtures by weighted name and time similarity.

    Every Crown fixture independently picks its highest-scoring API fixture
    (first one wins on ties) and is matched when that score reaches the
    threshold. Several Crown fixtures may pick the same API fixture.
    """

    def __init__(
        self,
        league_index: Optional[AliasIndex] = None,
        team_index: Optional[AliasIndex] = None,
        engine: Optional[SimilarityEngine] = None,
        threshold: Optional[float] = None,
        weights: Optional[MatchWeights] = None,
        workers: Optional[int] = None,
        skip_special: Optional[bool] = None,
    ):
        self.league_index = league_index
        self.team_index = team_index
        self.engine = engine or default_engine
        self.threshold = settings.match_threshold if threshold is None else threshold
        self.weights = weights or settings.match_weights
        self.workers = workers or settings.match_workers
        self.skip_special = (
            settings.skip_special_fixtures if skip_special is None else skip_special
        )
        self.unparsed_time_score = settings.unparsed_time_score
        self.time_window_minutes = settings.time_window_minutes
        logger.info(
            f"MatchOrchestrator initialized (threshold={self.threshold}, "
            f"workers={self.workers}, weights={self.weights.model_dump()})."
        )

    @classmethod
    async def from_resolver(cls, resolver: "AliasResolver", **kwargs) -> "MatchOrchestrator":
        """Builds an orchestrator over the resolver's current alias indexes."""
        league_index = await resolver.index_for(EntityType.LEAGUE)
        team_index = await resolver.index_for(EntityType.TEAM)
        return cls(league_index=league_index, team_index=team_index, **kwargs)

    # --- Scoring ---

    def time_score(self, kickoff: Optional[datetime], api: ApiFixture):
        if kickoff is None:
            return self.unparsed_time_score, UNPARSED_TIME_DIFF_MINUTES
        diff = minutes_between(api.kickoff, kickoff)
        return max(0.0, 1 - diff / self.time_window_minutes), diff

    def score_pair(
        self, crown: CrownFixture, kickoff: Optional[datetime], api: ApiFixture
    ) -> PairScore:
        time_score, time_diff = self.time_score(kickoff, api)
        league_score = self.engine.similarity_across_variants(
            crown.league, api.league_name, self.league_index
        )
        home_score = self.engine.best_across_names(
            crown.home, api.home_names, self.team_index
        )
        away_score = self.engine.best_across_names(
            crown.away, api.away_names, self.team_index
        )
        w = self.weights
        composite = (
            w.time * time_score
            + w.league * league_score
            + w.home * home_score
            + w.away * away_score
        )
        return PairScore(
            api=api,
            composite=composite,
            time_diff_minutes=time_diff,
            time_score=time_score,
            league_score=league_score,
            home_score=home_score,
            away_score=away_score,
        )

    def best_match(
        self,
        crown: CrownFixture,
        kickoff: Optional[datetime],
        api_fixtures: Sequence[ApiFixture],
    ) -> Optional[PairScore]:
        best: Optional[PairScore] = None
        for api in api_fixtures:
            scored = self.score_pair(crown, kickoff, api)
            if best is None or scored.composite > best.composite:
                best = scored
        return best

    def evaluate(
        self,
        crown: CrownFixture,
        api_fixtures: Sequence[ApiFixture],
        reference: datetime,
    ) -> CrownEvaluation:
        kickoff = parse_crown_kickoff(crown.kickoff_token, reference)
        if kickoff is None:
            logger.debug(
                f"Crown fixture {crown.id}: kickoff {crown.kickoff_token!r} unparsed, "
                "matching on names only."
            )
        best = self.best_match(crown, kickoff, api_fixtures)
        # Compared at the precision the score is reported with
        matched = best is not None and round(best.composite, 3) >= self.threshold
        return CrownEvaluation(crown=crown, best=best, matched=matched)

    # --- Batch ---

    def run(
        self,
        crown_fixtures: Sequence[CrownFixture],
        api_fixtures: Sequence[ApiFixture],
        reference_time: Optional[datetime] = None,
    ) -> MatchRun:
        reference = reference_time or datetime.now(timezone.utc)
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=timezone.utc)

        eligible = list(crown_fixtures)
        if self.skip_special:
            eligible = [c for c in eligible if not c.is_special]
            skipped = len(crown_fixtures) - len(eligible)
            if skipped:
                logger.info(f"Skipped {skipped} special-market Crown rows.")

        api_fixtures = list(api_fixtures)
        if not api_fixtures:
            logger.warning(
                f"No API fixtures supplied; all {len(eligible)} Crown fixtures unmatched."
            )

        def evaluate(crown: CrownFixture) -> CrownEvaluation:
            return self.evaluate(crown, api_fixtures, reference)

        if self.workers > 1 and len(eligible) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                evaluations = list(pool.map(evaluate, eligible))
        else:
            evaluations = [evaluate(crown) for crown in eligible]

        matches = [
            self._to_mapping(e.crown, e.best) for e in evaluations if e.matched
        ]
        matches.sort(key=lambda m: m.similarity_score, reverse=True)
        unmatched = [e for e in evaluations if not e.matched]

        logger.info(
            f"Matching complete: {len(matches)}/{len(eligible)} Crown fixtures matched "
            f"against {len(api_fixtures)} API fixtures."
        )
        return MatchRun(
            matches=matches,
            unmatched=unmatched,
            crown_count=len(eligible),
            api_count=len(api_fixtures),
        )

    def build_document(
        self,
        crown_fixtures: Sequence[CrownFixture],
        api_fixtures: Sequence[ApiFixture],
        source_generated_at: Optional[datetime] = None,
    ) -> MappingDocument:
        """Runs matching and packages the result as the mapping document."""
        result = self.run(crown_fixtures, api_fixtures, source_generated_at)
        sample = result.unmatched[: settings.unmatched_sample_size]
        return MappingDocument(
            source_generated_at=source_generated_at,
            crown_count=result.crown_count,
            api_count=result.api_count,
            matched_count=len(result.matches),
            unmatched_count=len(result.unmatched),
            matches=result.matches,
            unmatched=[self._to_unmatched(e) for e in sample],
        )

    @staticmethod
    def _to_mapping(crown: CrownFixture, best: PairScore) -> MatchMapping:
        api = best.api
        return MatchMapping(
            crown_id=crown.id,
            api_id=api.match_id,
            similarity_score=round(best.composite, 3),
            time_difference_minutes=best.time_diff_minutes,
            scores=ScoreBreakdown(
                time_score=round(best.time_score, 3),
                league_score=round(best.league_score, 3),
                home_score=round(best.home_score, 3),
                away_score=round(best.away_score, 3),
            ),
            crown=CrownSummary(
                league=crown.league,
                home=crown.home,
                away=crown.away,
                kickoff_token=crown.kickoff_token,
                source_show_type=crown.source_show_type,
            ),
            api=ApiSummary(
                league=api.league_name,
                home=api.home_name,
                away=api.away_name,
                match_time=api.kickoff,
            ),
        )

    @staticmethod
    def _to_unmatched(evaluation: CrownEvaluation) -> UnmatchedFixture:
        crown = evaluation.crown
        return UnmatchedFixture(
            crown_id=crown.id,
            league=crown.league,
            home=crown.home,
            away=crown.away,
            kickoff_token=crown.kickoff_token,
            best_score=(
                round(evaluation.best.composite, 3) if evaluation.best else None
            ),
        )
