from datetime import datetime, timezone

import pytest

from fixturelink.matching.kickoff import minutes_between, parse_crown_kickoff


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "token,expected",
    [
        ("06-15 03:30p", utc(2025, 6, 15, 15, 30)),
        ("06-15 03:30a", utc(2025, 6, 15, 3, 30)),
        ("06-15 12:15p", utc(2025, 6, 15, 12, 15)),
        ("06-15 12:15a", utc(2025, 6, 15, 0, 15)),
        ("6-5 9:05P", utc(2025, 6, 5, 21, 5)),
        ("06-15 11:59 p", utc(2025, 6, 15, 23, 59)),
    ],
)
def test_parses_twelve_hour_tokens(token, expected):
    assert parse_crown_kickoff(token, utc(2025, 6, 14, 10, 0)) == expected


def test_january_fixture_seen_in_december_rolls_forward():
    kickoff = parse_crown_kickoff("01-05 03:30p", utc(2024, 12, 28, 8, 0))
    assert kickoff == utc(2025, 1, 5, 15, 30)


def test_december_fixture_seen_in_january_rolls_back():
    kickoff = parse_crown_kickoff("12-30 09:00a", utc(2025, 1, 2, 8, 0))
    assert kickoff == utc(2024, 12, 30, 9, 0)


def test_no_rollover_within_half_a_year():
    kickoff = parse_crown_kickoff("03-10 08:00p", utc(2025, 1, 2, 8, 0))
    assert kickoff == utc(2025, 3, 10, 20, 0)


def test_rollover_window_is_configurable():
    # With a 30-day window, a fixture 60 days back is taken as next year's
    kickoff = parse_crown_kickoff("01-01 08:00p", utc(2025, 3, 2, 8, 0), rollover_days=30)
    assert kickoff == utc(2026, 1, 1, 20, 0)


def test_leap_day_moves_to_nearest_leap_year():
    kickoff = parse_crown_kickoff("02-29 08:00p", utc(2027, 12, 20, 0, 0))
    assert kickoff == utc(2028, 2, 29, 20, 0)


def test_naive_reference_is_taken_as_utc():
    kickoff = parse_crown_kickoff("06-15 03:30p", datetime(2025, 6, 14, 10, 0))
    assert kickoff == utc(2025, 6, 15, 15, 30)


@pytest.mark.parametrize("token", ["", None, "TBD", "Live", "13-45 10:00a", "06-15 15:30"])
def test_unparsable_tokens_return_none(token):
    assert parse_crown_kickoff(token, utc(2025, 6, 14, 10, 0)) is None


def test_minutes_between_truncates_and_is_symmetric():
    a = utc(2025, 6, 15, 15, 0)
    b = utc(2025, 6, 15, 15, 10, 59)
    assert minutes_between(a, b) == 10
    assert minutes_between(b, a) == 10
    assert minutes_between(a, a) == 0
