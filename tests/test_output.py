import json
from datetime import datetime, timezone

import pytest

from conftest import REFERENCE_TIME, epoch_millis, make_api, make_crown
from fixturelink.matching.orchestrator import MatchOrchestrator
from fixturelink.matching.output import (
    FixtureFileError,
    load_api_fixtures,
    load_crown_batch,
    write_mapping_document,
)


def _write(path, payload):
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def test_load_crown_batch(tmp_path):
    path = _write(
        tmp_path / "crown-gids.json",
        {
            "generatedAt": "2025-03-01T12:00:00Z",
            "matches": [
                {"crown_gid": "1", "league": "Japan J2 League", "home": "Oita Trinita",
                 "away": "Montedio Yamagata", "datetime": "03-01 12:10p"},
                {"league": "missing id"},
                {"gid": 2, "league": "K League 2", "home": "Suwon", "away": "Daegu",
                 "datetime": "03-01 02:00p"},
            ],
        },
    )

    batch = load_crown_batch(path)

    assert batch.generated_at == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert [f.id for f in batch.fixtures] == ["1", "2"]


def test_load_crown_batch_without_generated_at(tmp_path):
    path = _write(tmp_path / "crown.json", {"generatedAt": "yesterday", "matches": []})

    batch = load_crown_batch(path)

    assert batch.generated_at is None
    assert batch.fixtures == []


@pytest.mark.parametrize("payload", [[], {"matches": {"a": 1}}])
def test_load_crown_batch_rejects_wrong_shapes(tmp_path, payload):
    path = _write(tmp_path / "crown.json", payload)
    with pytest.raises(FixtureFileError):
        load_crown_batch(path)


def test_missing_or_corrupt_files_raise_fixture_file_error(tmp_path):
    with pytest.raises(FixtureFileError, match="not found"):
        load_api_fixtures(tmp_path / "absent.json")

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    with pytest.raises(FixtureFileError):
        load_crown_batch(corrupt)


@pytest.mark.parametrize("wrap", [False, True])
def test_load_api_fixtures_accepts_list_or_object(tmp_path, wrap):
    rows = [
        {"matchId": "a1", "leagueName": "Japan J2 League", "homeName": "Oita Trinita",
         "awayName": "Montedio Yamagata", "kickoffEpochMillis": epoch_millis(REFERENCE_TIME)},
        {"matchId": "a2", "leagueName": "No kickoff"},
    ]
    path = _write(tmp_path / "api.json", {"matches": rows} if wrap else rows)

    fixtures = load_api_fixtures(path)

    assert [f.match_id for f in fixtures] == ["a1"]
    assert fixtures[0].kickoff == REFERENCE_TIME


def test_write_mapping_document(tmp_path, league_index, team_index):
    crowns = [make_crown("c1", "英超", "热刺", "Man Utd"), make_crown("c2", "K League 2", "Suwon", "Daegu")]
    apis = [make_api("a1", "English Premier League", "Tottenham Hotspur", "Manchester United")]
    orchestrator = MatchOrchestrator(league_index, team_index)
    document = orchestrator.build_document(crowns, apis, REFERENCE_TIME)

    path = write_mapping_document(document, tmp_path / "out" / "crown-match-map.json")

    written = json.loads(path.read_text(encoding="utf-8"))
    assert written["crownCount"] == 2
    assert [m["apiId"] for m in written["matches"]] == ["a1"]
    assert written["sourceGeneratedAt"].startswith("2025-03-01T12:00:00")
    assert [u["crownId"] for u in written["unmatched"]] == ["c2"]
    # Non-ASCII names are written as-is
    assert "热刺" in path.read_text(encoding="utf-8")
