import asyncio
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from fixturelink.aliases.index import AliasIndex
from fixturelink.aliases.seed import SEED_LEAGUES, SEED_TEAMS
from fixturelink.models.alias import CanonicalNameRecord
from fixturelink.models.enums import EntityType
from fixturelink.models.fixture import ApiFixture, CrownFixture
from fixturelink.storage.base import AliasStoreError
from fixturelink.storage.memory_store import InMemoryAliasStore

REFERENCE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def epoch_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def make_crown(
    crown_id: str, league: str, home: str, away: str, kickoff: str = "03-01 12:00p", **extra
) -> CrownFixture:
    return CrownFixture(
        id=crown_id, league=league, home=home, away=away, datetime=kickoff, **extra
    )


def make_api(
    match_id: str,
    league: str,
    home: str,
    away: str,
    kickoff: Optional[datetime] = None,
    **extra,
) -> ApiFixture:
    return ApiFixture(
        match_id=match_id,
        league_name=league,
        home_name=home,
        away_name=away,
        kickoff_epoch_millis=epoch_millis(kickoff or REFERENCE_TIME),
        **extra,
    )


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingStore(InMemoryAliasStore):
    """In-memory store that counts reads and can be switched offline."""

    def __init__(self, records=None, delay: float = 0.0):
        super().__init__(records)
        self.fetch_calls = 0
        self.offline = False
        self.delay = delay

    async def fetch_records(self, entity_type: EntityType) -> List[CanonicalNameRecord]:
        self.fetch_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.offline:
            raise AliasStoreError("store offline")
        return await super().fetch_records(entity_type)


SPURS = CanonicalNameRecord(
    canonical_key="team:tottenhamhotspur",
    name_en="Tottenham Hotspur",
    name_zh_cn="托特纳姆热刺",
    name_zh_tw="托特納姆熱刺",
    aliases=("Spurs", "THFC"),
)


@pytest.fixture
def team_index() -> AliasIndex:
    return AliasIndex(EntityType.TEAM, SEED_TEAMS)


@pytest.fixture
def league_index() -> AliasIndex:
    return AliasIndex(EntityType.LEAGUE, SEED_LEAGUES)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> CountingStore:
    return CountingStore({EntityType.TEAM: [SPURS]})


@pytest.fixture
def reference_time() -> datetime:
    return REFERENCE_TIME


@pytest.fixture
def later():
    def _later(minutes: int) -> datetime:
        return REFERENCE_TIME + timedelta(minutes=minutes)

    return _later
