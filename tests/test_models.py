from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from fixturelink.config.settings import AppSettings, MatchWeights
from fixturelink.models.alias import AliasMutation, CanonicalNameRecord
from fixturelink.models.enums import EntityType
from fixturelink.models.fixture import ApiFixture, CrownFixture


def test_crown_fixture_from_fetcher_row():
    crown = CrownFixture.model_validate(
        {
            "crown_gid": 8123456,
            "league": " Japan J2 League ",
            "lid": 101,
            "home": "Oita Trinita",
            "away": "Montedio Yamagata",
            "datetime": "03-01 12:10p",
            "sourceShowType": "today",
            "more": 14,
        }
    )

    assert crown.id == "8123456"
    assert crown.league == "Japan J2 League"
    assert crown.league_id == "101"
    assert crown.kickoff_token == "03-01 12:10p"
    assert crown.source_show_type == "today"
    assert crown.model_extra == {"more": 14}
    assert not crown.is_special


def test_crown_fixture_requires_an_id():
    with pytest.raises(ValidationError):
        CrownFixture.model_validate({"league": "Japan J2 League"})


@pytest.mark.parametrize(
    "league,home,away",
    [
        ("Premier League Specials", "Arsenal", "Chelsea"),
        ("Premier League", "Home Team", "Away Team"),
        ("SPECIAL BETS", "", ""),
    ],
)
def test_special_crown_rows(league, home, away):
    assert CrownFixture(id="1", league=league, home=home, away=away).is_special


def test_api_fixture_from_camel_case_row():
    api = ApiFixture.model_validate(
        {
            "matchId": 990001,
            "leagueName": "China Super League",
            "homeName": "Qingdao Hainiu",
            "homeNameSimplified": "青岛海牛",
            "homeNameTraditional": "青島海牛",
            "awayName": "Wuhan Three Towns",
            "awayNameTraditional": "武漢三鎮",
            "kickoffEpochMillis": 1740830400000,
            "status": 0,
        }
    )

    assert api.match_id == "990001"
    assert api.kickoff == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert api.home_names == ("Qingdao Hainiu", "青岛海牛", "青島海牛")
    assert api.away_names == ("Wuhan Three Towns", "武漢三鎮")


@pytest.mark.parametrize(
    "raw,expected",
    [(3, 3), ("-1", -1), ("2", 2), ("NS", 0), ("Postp.", 0), ("", None), (None, None)],
)
def test_api_fixture_status_tolerates_textual_states(raw, expected):
    api = ApiFixture(match_id="1", kickoff_epoch_millis=0, status=raw)
    assert api.status == expected


def test_api_fixture_name_list_skips_blanks_and_duplicates():
    api = ApiFixture(
        match_id="1",
        home_name="",
        home_name_simplified="大分三神",
        home_name_traditional="大分三神",
        kickoff_epoch_millis=0,
    )
    assert api.home_names == ("大分三神",)
    assert api.away_names == ()


def test_canonical_record_display_priority():
    record = CanonicalNameRecord(
        canonical_key="team:qingdaohainiu",
        name_en="Qingdao Hainiu",
        name_zh_cn="  ",
        name_zh_tw="青島海牛",
    )
    assert record.name_zh_cn is None
    assert record.display_name == "青島海牛"
    assert record.name_fields == ("青島海牛", "Qingdao Hainiu")


def test_canonical_record_requires_a_name_or_alias():
    with pytest.raises(ValidationError):
        CanonicalNameRecord(canonical_key="team:empty")
    assert CanonicalNameRecord(canonical_key="team:bvb", aliases=("BVB",)).display_name is None


def test_canonical_record_is_immutable():
    record = CanonicalNameRecord(canonical_key="team:suwon", name_en="Suwon")
    with pytest.raises(ValidationError):
        record.canonical_key = "team:other"


def test_alias_mutation_splits_delimited_aliases():
    mutation = AliasMutation(name_en="Oita Trinita", aliases="Trinita\n大分，Oita; ;")
    assert mutation.aliases == ["Trinita", "大分", "Oita"]


@pytest.mark.parametrize(
    "fields,primary",
    [
        ({"name_en": "Oita Trinita", "name_zh_cn": "大分三神"}, "Oita Trinita"),
        ({"name_zh_tw": "大分三神", "name_zh_cn": "大分三神"}, "大分三神"),
        ({"aliases": ["Trinita"]}, "Trinita"),
    ],
)
def test_alias_mutation_primary_name(fields, primary):
    assert AliasMutation(**fields).primary_name == primary


def test_alias_mutation_rejects_bad_aliases():
    with pytest.raises(ValidationError):
        AliasMutation(name_en="Oita Trinita", aliases=42)


def test_entity_type_keys():
    assert EntityType.TEAM.key_for("oitatrinita") == "team:oitatrinita"
    assert EntityType.LEAGUE.key_for("") == "league:unknown"
    assert EntityType.LEAGUE.table_name == "league_aliases"


def test_match_weights_must_sum_to_one():
    assert MatchWeights().model_dump() == {"time": 0.2, "league": 0.2, "home": 0.3, "away": 0.3}
    with pytest.raises(ValidationError):
        MatchWeights(time=0.5, league=0.5, home=0.5, away=0.5)


def test_settings_read_nested_weights_from_environment(monkeypatch):
    monkeypatch.setenv("MATCH_THRESHOLD", "0.6")
    monkeypatch.setenv("MATCH_WEIGHTS__TIME", "0.1")
    monkeypatch.setenv("MATCH_WEIGHTS__LEAGUE", "0.3")

    loaded = AppSettings(_env_file=None)

    assert loaded.match_threshold == 0.6
    assert loaded.match_weights.time == 0.1
    assert loaded.match_weights.league == 0.3
    assert loaded.match_weights.home == 0.3
