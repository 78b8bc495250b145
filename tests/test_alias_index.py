from fixturelink.aliases.index import AliasIndex
from fixturelink.models.alias import CanonicalNameRecord
from fixturelink.models.enums import EntityType
from fixturelink.normalization.normalizer import normalize


def _record(key, **fields) -> CanonicalNameRecord:
    return CanonicalNameRecord(canonical_key=key, **fields)


def test_alias_set_holds_every_normalized_spelling(team_index):
    alias_set = team_index.alias_set("team:qingdaohainiu")
    assert alias_set == {"qingdaohainiu", "qingdao"}


def test_lookup_by_any_spelling(team_index):
    for spelling in ("Tottenham Hotspur", "Tottenham", "SPURS", "热刺", "熱刺"):
        record = team_index.lookup(normalize(spelling))
        assert record.canonical_key == "team:tottenhamhotspur"
    assert team_index.lookup("oitatrinita") is None


def test_shared_alias_resolves_to_first_loaded_record():
    index = AliasIndex(
        EntityType.TEAM,
        [
            _record("team:internacional", name_en="Internacional", aliases=("Inter",)),
            _record("team:intermilan", name_en="Inter Milan", aliases=("Inter",)),
        ],
    )
    assert index.lookup("inter").canonical_key == "team:internacional"
    assert len(index.records_for("inter")) == 2
    # Both records' spellings are candidates for the shared alias
    assert index.variants_for("inter") == {"internacional", "inter", "intermilan"}


def test_duplicate_canonical_keys_keep_the_first():
    index = AliasIndex(
        EntityType.TEAM,
        [
            _record("team:suwon", name_en="Suwon"),
            _record("team:suwon", name_en="Suwon Bluewings"),
        ],
    )
    assert len(index) == 1
    assert index.get("team:suwon").name_en == "Suwon"
    assert index.lookup("suwonbluewings") is None


def test_empty_index():
    index = AliasIndex(EntityType.LEAGUE)
    assert len(index) == 0
    assert index.lookup("englishpremierleague") is None
    assert index.variants_for("englishpremierleague") == set()
    assert index.alias_set("league:englishpremierleague") == frozenset()
    assert index.search("premier") == []


def test_search_matches_key_names_and_aliases(league_index):
    assert [r.canonical_key for r in league_index.search("EPL")] == [
        "league:englishpremierleague"
    ]
    assert [r.canonical_key for r in league_index.search("日职乙")] == ["league:japanj2league"]
    assert [r.canonical_key for r in league_index.search("bundes")] == [
        "league:germanybundesliga"
    ]
    # Normalized form: "Japan-J2" is found through "japanj2league"
    assert [r.canonical_key for r in league_index.search("Japan-J2")] == [
        "league:japanj2league"
    ]


def test_search_without_text_lists_everything(league_index):
    assert len(league_index.search()) == len(league_index)
    assert len(league_index.search("   ")) == len(league_index)
