from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel

from fixturelink.aliases.resolver import AliasError, AliasResolver
from fixturelink.models.enums import EntityType, MatchSource
from fixturelink.models.fixture import ApiFixture
from fixturelink.normalization.normalizer import contains_cjk
from fixturelink.storage.base import AliasStoreError


class ImportSummary(BaseModel):
    leagues_created: int = 0
    teams_created: int = 0
    skipped: int = 0
    failed: int = 0


class ObservedName(BaseModel):
    """One entity as the API spelled it, in whichever scripts it supplied."""

    name_en: Optional[str] = None
    name_zh_cn: Optional[str] = None
    name_zh_tw: Optional[str] = None

    @property
    def spellings(self) -> Tuple[str, ...]:
        return tuple(n for n in (self.name_en, self.name_zh_cn, self.name_zh_tw) if n)


def _single_name(name: str) -> ObservedName:
    # A lone name of unknown language: CJK goes to the Simplified slot
    if contains_cjk(name):
        return ObservedName(name_zh_cn=name)
    return ObservedName(name_en=name)


def _team_name(english: str, simplified: Optional[str], traditional: Optional[str]) -> ObservedName:
    observed = _single_name(english) if english else ObservedName()
    return ObservedName(
        name_en=observed.name_en,
        name_zh_cn=simplified or observed.name_zh_cn,
        name_zh_tw=traditional,
    )


def collect_observed_names(
    api_fixtures: Iterable[ApiFixture],
) -> Dict[EntityType, List[ObservedName]]:
    leagues: List[ObservedName] = []
    teams: List[ObservedName] = []
    for fixture in api_fixtures:
        if fixture.league_name:
            leagues.append(_single_name(fixture.league_name))
        teams.append(
            _team_name(
                fixture.home_name,
                fixture.home_name_simplified,
                fixture.home_name_traditional,
            )
        )
        teams.append(
            _team_name(
                fixture.away_name,
                fixture.away_name_simplified,
                fixture.away_name_traditional,
            )
        )
    return {
        EntityType.LEAGUE: [n for n in leagues if n.spellings],
        EntityType.TEAM: [n for n in teams if n.spellings],
    }


async def import_observed_names(
    resolver: AliasResolver, api_fixtures: Iterable[ApiFixture]
) -> ImportSummary:
    """Registers league/team names seen in API fixtures that no record knows yet.

    Names that already resolve (by any of their spellings) are skipped. A
    failed write is logged and counted; the import carries on.
    """
    summary = ImportSummary()
    observed = collect_observed_names(api_fixtures)

    for entity_type, names in observed.items():
        index = await resolver.index_for(entity_type)
        seen = set()
        for name in names:
            keys = {resolver.normalizer.normalize(s) for s in name.spellings} - {""}
            if not keys or keys & seen:
                summary.skipped += 1
                continue
            seen.update(keys)

            known = any(
                resolver.resolve_with_index(s, index).match_source != MatchSource.FALLBACK
                for s in name.spellings
            )
            if known:
                summary.skipped += 1
                continue

            try:
                await resolver.create_record(entity_type, name.model_dump())
            except (AliasError, AliasStoreError) as e:
                logger.warning(
                    f"Failed to import {entity_type.value} {name.spellings[0]!r}: {e}"
                )
                summary.failed += 1
                continue

            if entity_type == EntityType.LEAGUE:
                summary.leagues_created += 1
            else:
                summary.teams_created += 1

    logger.info(
        f"Observed-name import finished: {summary.leagues_created} leagues and "
        f"{summary.teams_created} teams created, {summary.skipped} skipped, "
        f"{summary.failed} failed."
    )
    return summary
