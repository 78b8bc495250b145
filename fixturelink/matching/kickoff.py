import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from loguru import logger

from fixturelink.config.settings import settings

CROWN_KICKOFF_RE = re.compile(
    r"(\d{1,2})-(\d{1,2})\s+(\d{1,2}):(\d{2})\s*([ap])", re.IGNORECASE
)


def _at_year(
    year: int, month: int, day: int, hour: int, minute: int
) -> Optional[datetime]:
    try:
        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_crown_kickoff(
    token: Optional[str],
    reference: datetime,
    rollover_days: Optional[int] = None,
) -> Optional[datetime]:
    """Parses a yearless Crown kickoff token such as ``"01-05 03:30p"``.

    The year is taken from ``reference`` (the batch generation time). When
    that lands more than ``rollover_days`` away from the reference, the year
    moves one step toward it, so a January fixture seen in late December
    lands in the next year. Returns None for anything unparsable.
    """
    if not token:
        return None
    match = CROWN_KICKOFF_RE.search(token)
    if not match:
        logger.debug(f"Unparsable Crown kickoff token: {token!r}")
        return None

    month, day, hour, minute = (int(g) for g in match.groups()[:4])
    is_pm = match.group(5).lower() == "p"
    if is_pm and hour < 12:
        hour += 12
    if not is_pm and hour == 12:
        hour = 0

    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)

    kickoff = _at_year(reference.year, month, day, hour, minute)
    if kickoff is None:
        # Feb 29 outside a leap year: only a neighbouring year can hold it
        candidates = [
            c
            for c in (
                _at_year(reference.year + 1, month, day, hour, minute),
                _at_year(reference.year - 1, month, day, hour, minute),
            )
            if c is not None
        ]
        if not candidates:
            logger.debug(f"Out-of-range Crown kickoff token: {token!r}")
            return None
        return min(candidates, key=lambda c: abs(c - reference))

    limit = timedelta(days=rollover_days or settings.year_rollover_days)
    if abs(kickoff - reference) > limit:
        shift = 1 if kickoff < reference else -1
        shifted = _at_year(kickoff.year + shift, month, day, hour, minute)
        if shifted is not None:
            kickoff = shifted

    return kickoff


def minutes_between(a: datetime, b: datetime) -> int:
    """Whole minutes between two instants, truncated."""
    return int(abs((a - b).total_seconds()) // 60)
